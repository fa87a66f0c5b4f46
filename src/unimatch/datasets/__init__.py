from .tabular import to_labels as to_labels, to_matrix as to_matrix
from .toy import (
    THREE_CLUSTER_HOLDOUT as THREE_CLUSTER_HOLDOUT,
    make_blobs as make_blobs,
    make_three_clusters as make_three_clusters,
)

__all__ = ["to_matrix", "to_labels", "THREE_CLUSTER_HOLDOUT", "make_blobs", "make_three_clusters"]
