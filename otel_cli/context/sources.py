"""Where an inbound traceparent comes from."""

from __future__ import annotations

import os
from typing import Mapping, Optional

TRACEPARENT_ENV = "TRACEPARENT"


class ContextSource:
    """Supplies the raw inbound traceparent, if there is one."""

    def get_traceparent(self) -> Optional[str]:
        raise NotImplementedError


class EnvironmentContextSource(ContextSource):
    """Reads ``TRACEPARENT`` from an environment mapping (``os.environ`` by default)."""

    def __init__(
        self,
        environ: Optional[Mapping[str, str]] = None,
        variable: str = TRACEPARENT_ENV,
    ) -> None:
        self.environ = os.environ if environ is None else environ
        self.variable = variable

    def get_traceparent(self) -> Optional[str]:
        return self.environ.get(self.variable)


class StaticContextSource(ContextSource):
    """Returns a fixed value; used when embedding the pipeline and in tests."""

    def __init__(self, traceparent: Optional[str] = None) -> None:
        self.traceparent = traceparent

    def get_traceparent(self) -> Optional[str]:
        return self.traceparent
