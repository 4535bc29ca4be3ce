"""Raw API response types for the Pingdom REST API.

Pydantic models for the payloads the client core itself has to understand.
Resource payloads (checks, probes, teams, ...) are decoded into whatever
type the caller supplies and are not modelled here.
"""

from pydantic import BaseModel, ConfigDict, Field


class ErrorDetail(BaseModel):
    """Body of the ``error`` object returned on non-2xx responses.

    Only ``message`` is guaranteed. The status fields are filled in when the
    service echoes them back.
    """

    model_config = ConfigDict(populate_by_name=True)

    message: str
    status_code: int | None = Field(None, alias="statuscode")
    status_desc: str | None = Field(None, alias="statusdesc")


class ErrorEnvelope(BaseModel):
    """Top-level error payload: ``{"error": {...}}``."""

    error: ErrorDetail
