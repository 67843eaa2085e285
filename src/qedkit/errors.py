"""Exceptions raised by the model, amplitude and library layers."""


class ModelError(ValueError):
    """Invalid model configuration or lifecycle violation."""


class AmplitudeError(ValueError):
    """Leg specification inconsistent with the model, or unsupported process."""


class LibraryBuildError(RuntimeError):
    """Generation or compilation of a numeric library failed."""
