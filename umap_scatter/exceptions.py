class UMAPScatterError(Exception):
    """Base class for exceptions in umap_scatter."""
    pass


class MissingDependencyError(UMAPScatterError):
    """Raised when a required dependency is missing."""
    pass


class AnnotationError(UMAPScatterError, ValueError):
    """Raised when the annotation table cannot be used for plotting."""
    pass


class PlotSpecError(UMAPScatterError, ValueError):
    """Raised when a plot request is malformed or references unknown columns."""
    pass
