"""Configuration for the Pingdom API client."""

import json
import pathlib

import httpx
import pydantic


class ClientConfig(pydantic.BaseModel):
    """Credentials and endpoint for a Pingdom API client.

    ``http_client`` cannot be read from a file; attach one to a loaded
    config with ``config.model_copy(update={"http_client": ...})``.
    """

    model_config = pydantic.ConfigDict(frozen=True, arbitrary_types_allowed=True)

    user: str = pydantic.Field(description="Basic auth user name")
    password: str = pydantic.Field(description="Basic auth password", repr=False)
    api_key: str = pydantic.Field(description="Key sent as App-Key", repr=False)
    account_email: str = pydantic.Field(
        "",
        description="Sub-account to act on behalf of in multi-user setups",
    )
    base_url: str = pydantic.Field(
        "",
        description="API base URL, empty for the public Pingdom endpoint",
    )
    http_client: httpx.Client | None = pydantic.Field(
        None,
        description="Transport used for round trips, shared default when unset",
        exclude=True,
    )


def load_config(config_path: str | pathlib.Path) -> ClientConfig:
    """Load client configuration from a JSON file."""
    path = pathlib.Path(config_path)
    if not path.exists():
        msg = f"Configuration file not found: {config_path}"
        raise FileNotFoundError(msg)

    with path.open("r") as f:
        data = json.load(f)

    return ClientConfig(**data)
