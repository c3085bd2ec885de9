"""Exceptions raised by the site selection entry points.

All of them derive from ValueError so existing ``except ValueError``
handlers keep working.
"""


class SurveyDesignError(ValueError):
    """Base class for input and state errors."""


class MissingArgumentError(SurveyDesignError):
    """A mandatory argument was not supplied."""

    def __init__(self, argument: str, detail: str = ""):
        self.argument = argument
        message = f"Argument '{argument}' must be defined"
        if detail:
            message = f"{message} {detail}"
        super().__init__(message + ".")


class InvalidColumnError(SurveyDesignError):
    """A named column is not present in the table."""

    def __init__(self, column, table: str = "data"):
        self.column = column
        super().__init__(f"{column} is not one of the columns in '{table}'.")


class InvalidOptionError(SurveyDesignError):
    """An enumerated argument is outside its accepted values."""

    def __init__(self, argument: str, value, options):
        self.argument = argument
        self.value = value
        self.options = tuple(options)
        listed = ", ".join(f"'{o}'" for o in self.options)
        super().__init__(
            f"Argument '{argument}' is not valid ({value!r}), options are: {listed}"
        )


class MissingPreconditionError(SurveyDesignError):
    """A required prior processing step has not been run."""


class InvalidArgumentError(SurveyDesignError):
    """An argument has the right type but an unusable value."""
