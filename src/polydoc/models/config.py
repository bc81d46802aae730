from __future__ import annotations

from typing import Annotated, Dict, Literal, Optional, Union

from pydantic import BaseModel, Field, NonNegativeInt, PositiveFloat, SecretStr, model_validator


# -----------------
# Index auth
# -----------------


class IndexAuthNoneConfig(BaseModel):
    kind: Literal["none"] = "none"


class IndexAuthBasicConfig(BaseModel):
    """Elasticsearch native realm user."""

    kind: Literal["basic"] = "basic"

    username: str
    password: SecretStr


class IndexAuthApiKeyConfig(BaseModel):
    """Elasticsearch API key, sent as ``Authorization: ApiKey <credential>``.

    Give either the ``encoded`` credential returned by the create-API-key call,
    or the key ``id`` together with its ``api_key``.
    """

    kind: Literal["api_key"] = "api_key"

    encoded: Optional[SecretStr] = None
    id: Optional[str] = None
    api_key: Optional[SecretStr] = None

    @model_validator(mode="after")
    def _validate_credential(self) -> "IndexAuthApiKeyConfig":
        has_pair = self.id is not None and self.api_key is not None
        if self.encoded is None and not has_pair:
            raise ValueError("api_key auth requires either encoded or both id and api_key")
        if self.encoded is not None and (self.id is not None or self.api_key is not None):
            raise ValueError("api_key auth takes encoded or id/api_key, not both")
        return self


IndexAuthConfig = Annotated[
    Union[
        IndexAuthNoneConfig,
        IndexAuthBasicConfig,
        IndexAuthApiKeyConfig,
    ],
    Field(discriminator="kind"),
]


# -----------------
# Index client
# -----------------


class IndexClientConfig(BaseModel):
    base_url: str = "http://localhost:9200"
    # Used when a call does not name an index explicitly.
    default_index: Optional[str] = None
    timeout_seconds: PositiveFloat = 30.0
    headers: Dict[str, str] = Field(default_factory=dict)

    auth: IndexAuthConfig = Field(default_factory=IndexAuthNoneConfig)

    @model_validator(mode="after")
    def _validate_base_url(self) -> "IndexClientConfig":
        if not self.base_url.startswith(("http://", "https://")):
            raise ValueError("base_url must start with 'http://' or 'https://'")
        return self


# -----------------
# Codec
# -----------------


class CodecConfig(BaseModel):
    # Drop fields whose value is None instead of writing null.
    omit_none: bool = True
    # Pretty-print encoded bodies; compact when None.
    indent: Optional[NonNegativeInt] = None
    # Reserved key older writers embedded in stored bodies.
    discriminator_key: str = "$type"


class PolydocConfig(BaseModel):
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    codec: CodecConfig = Field(default_factory=CodecConfig)

    # Optional so codec-only setups need no index section.
    index: Optional[IndexClientConfig] = None
