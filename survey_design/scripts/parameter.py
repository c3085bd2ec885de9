# File containing shared parameters for site selection and clustering

# Column names expected in the master data matrix
longitude_column = "Longitude"
latitude_column = "Latitude"
geo_columns = (longitude_column, latitude_column)
block_column = "Block"
cluster_column = "clusters"
selection_column = "Selected_blocks"

# Defaults
default_seed = 1
default_replicates = 10
default_mc_replicates = 1000
default_max_iterations = 30
kmeans_n_init = 10

# Kernel density grid (points and bandwidths beyond the data range)
density_points = 512
density_cut = 3

# Geodesic distances are computed on this ellipsoid, in metres
ellipsoid = "WGS84"

# Add target CRS parameters
target_crs_epsg = 4326
target_crs_str = f"EPSG:{target_crs_epsg}"
