"""Retryability policy: decides whether a failure justifies a retry.

An error is retryable when its kind is network, timeout or server. Every
other kind either will not improve when retried unmodified (auth,
notFound, validation, unknown) or needs an explicit reaction from the
caller (rateLimit).
"""

from __future__ import annotations

from collections.abc import Iterable

from retrykit.core.errors import RETRYABLE_KINDS, ErrorClassifier, ErrorKind, classify_error


def is_retryable(error: object) -> bool:
    """Whether the default policy permits retrying after ``error``."""
    return classify_error(error) in RETRYABLE_KINDS


class RetryabilityPolicy:
    """Callable retry predicate built on an ErrorClassifier.

    Example:
        policy = RetryabilityPolicy(
            retryable_kinds={ErrorKind.NETWORK, ErrorKind.SERVER},
        )
        engine = RetryEngine(fetch, should_retry=policy)
    """

    def __init__(
        self,
        classifier: ErrorClassifier | None = None,
        retryable_kinds: Iterable[ErrorKind] = RETRYABLE_KINDS,
    ) -> None:
        self._classifier = classifier or ErrorClassifier()
        self.retryable_kinds = frozenset(retryable_kinds)

    def __call__(self, error: object) -> bool:
        return self._classifier.classify(error) in self.retryable_kinds

    def __repr__(self) -> str:
        kinds = ", ".join(sorted(kind.value for kind in self.retryable_kinds))
        return f"RetryabilityPolicy(retryable_kinds={{{kinds}}})"


DEFAULT_POLICY = RetryabilityPolicy()
