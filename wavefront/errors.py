"""Exceptions raised by the wavefront propagation core."""


class ConfigurationError(ValueError):
    """Invalid parameters passed to the solver, extractor or evaluator.

    Raised synchronously before any computation begins; never retried.
    """
