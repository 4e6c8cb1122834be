"""Release bounded context.

Types shared by the artifact readers (sfp.artifacts) and the publish
orchestration (sfp.services.publish).
"""

from __future__ import annotations
