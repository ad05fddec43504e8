from bagofholding.analysis.matching import compute_matches

__all__ = [
    "compute_matches",
]
