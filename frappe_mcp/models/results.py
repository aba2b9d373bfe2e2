"""Result models for the Frappe MCP server."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class ContentBlock(BaseModel):
    """One text unit of a tool result."""

    type: Literal["text"] = "text"
    text: str


class ToolResult(BaseModel):
    """Uniform tool-call result, identical in shape for success and failure."""

    model_config = ConfigDict(populate_by_name=True)

    content: list[ContentBlock] = Field(default_factory=list, description="Ordered text blocks")
    is_error: bool = Field(default=False, alias="isError", description="Failure flag")

    @classmethod
    def text(cls, *texts: str, is_error: bool = False) -> "ToolResult":
        return cls(content=[ContentBlock(text=t) for t in texts], is_error=is_error)

    @classmethod
    def error(cls, *texts: str) -> "ToolResult":
        return cls.text(*texts, is_error=True)

    @property
    def first_text(self) -> str:
        return self.content[0].text if self.content else ""

    def to_mcp(self) -> dict:
        return self.model_dump(by_alias=True)


class HealthStatus(BaseModel):
    """Combined health of the token and password channels."""

    model_config = ConfigDict(populate_by_name=True)

    healthy: bool = Field(..., description="At least one channel works")
    token_auth: bool = Field(..., alias="tokenAuth", description="Token channel check result")
    password_auth: bool | None = Field(
        default=None,
        alias="passwordAuth",
        description="Password channel check result; None when not configured",
    )
    message: str = Field(..., description="Per-channel status summary")


class HealthResponse(HealthStatus):
    """Health check response body."""

    version: str = Field(..., description="Server version")


class InfoResponse(BaseModel):
    """Server info response body."""

    name: str = Field(..., description="Server name")
    version: str = Field(..., description="Server version")
    frappe_url: str = Field(..., description="Configured Frappe site")
    tools: list[str] = Field(default_factory=list, description="Registered tool names")
