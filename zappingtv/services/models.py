"""Pydantic models for Zapping API payloads."""

from pydantic import BaseModel, Field


class Channel(BaseModel):
    """A channel in the catalog."""

    number: int
    name: str
    url: str
    image: str = ""

    @property
    def label(self) -> str:
        """List label, e.g. "  7 - Canal 13"."""
        return f"{self.number:>3} - {self.name}"


class ActivationCode(BaseModel):
    code: str


class GetCodeResponse(BaseModel):
    """Response of the activation get-code endpoint."""

    status: str | bool | None = None
    data: ActivationCode


class LinkedToken(BaseModel):
    data: str | None = None  # The device token


class CheckLinkedResponse(BaseModel):
    """Response of the activation linked endpoint."""

    status: bool | str | None = None
    data: LinkedToken | None = None


class PlayToken(BaseModel):
    play_token: str = Field(alias="playToken")


class PlayTokenResponse(BaseModel):
    """Response of the play-token login endpoint."""

    status: str | bool | None = None
    data: PlayToken


class ChannelListResponse(BaseModel):
    """Channel catalog keyed by upstream channel id."""

    data: dict[str, Channel] = Field(default_factory=dict)
