from __future__ import annotations

from typing import Optional

from models.snapshot import Snapshot
from providers.base import require_credential
from services.errors import Unimplemented


class DOEProvider:
    """Malaysian Department of Environment feed.

    Access to the DOE API has not been granted yet, so a configured key still
    ends in ``Unimplemented``.
    """

    name = "doe"

    def fetch(self, credential: Optional[str]) -> Snapshot:
        require_credential(self.name, credential)
        raise Unimplemented(self.name, "DOE API access pending")
