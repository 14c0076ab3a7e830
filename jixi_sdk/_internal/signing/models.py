"""Pydantic models for URL signing."""

from pydantic import BaseModel, Field

DEFAULT_SIGN_ENDPOINT = "https://api.jixi.ai/sign-url"
DEFAULT_BATCH_EXPIRES_IN = 1800
DEFAULT_SINGLE_EXPIRES_IN = 60


class SignRequest(BaseModel):
    """Batch of URLs to sign.

    Serialized as ``{"urls": [...], "expiresIn": N}``.
    """

    urls: list[str]
    expires_in: int = Field(default=DEFAULT_BATCH_EXPIRES_IN, alias="expiresIn")

    model_config = {"populate_by_name": True}

    def to_json(self) -> str:
        """Render the wire payload.

        Only backslash and double quote are escaped in each URL.
        """
        quoted = ",".join(f'"{escape_json(url)}"' for url in self.urls)
        return f'{{"urls":[{quoted}],"expiresIn":{self.expires_in}}}'


class SignedUrlList(BaseModel):
    """Response envelope carrying signed URLs under ``urls``."""

    urls: list[str] | None = None


def escape_json(value: str) -> str:
    if not value:
        return ""
    return value.replace("\\", "\\\\").replace('"', '\\"')
