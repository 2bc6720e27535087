from pydantic import BaseModel, Field


class ProjectRules(BaseModel):
    slug: str
    rules_version: str


class BlockProperty(BaseModel):
    type: str | None = None
    nullable: bool = False
    min: int | None = None
    max: int | None = None


class BlockSchema(BaseModel):
    required: list[str] = Field(default_factory=list)
    properties: dict[str, BlockProperty] = Field(default_factory=dict)


class BlocksRules(BaseModel):
    allowed_types: list[str]
    max_blocks_per_item: int
    schemas: dict[str, BlockSchema]


class PreviewRules(BaseModel):
    excerpt_length: int = 150
    ellipsis: str = "..."


class UploadsRules(BaseModel):
    max_upload_bytes: int
    allowlist_mime_types: list[str]


class DraftsRules(BaseModel):
    upload_timeout_seconds: int = 600


class Rules(BaseModel):
    project: ProjectRules
    blocks: BlocksRules
    preview: PreviewRules = Field(default_factory=PreviewRules)
    uploads: UploadsRules
    drafts: DraftsRules = Field(default_factory=DraftsRules)
