from survey_design.model.master import BlockArguments, MasterMatrix, MasterSelection

__all__ = ["BlockArguments", "MasterMatrix", "MasterSelection"]
