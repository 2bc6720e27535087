from typing import Any

from src.domain.entities import BlockType, ContentBlock
from src.domain.errors import BlockFieldError, InvalidBlockTypeError, MissingRequiredFieldError
from src.rules.models import BlockProperty, BlocksRules


def is_upload_incomplete(block: ContentBlock) -> bool:
    """An image block whose upload never produced a URL."""
    if BlockType.parse(block.block_type) != BlockType.IMAGE:
        return False
    return not block.data_json.get("url")


class BlockValidator:
    def __init__(self, rules: BlocksRules):
        self.rules = rules

    def validate(self, block: ContentBlock) -> None:
        """
        Validate a ContentBlock against the closed type set and configured schemas.

        Raises:
            InvalidBlockTypeError: type is unknown or not enabled.
            MissingRequiredFieldError: a required payload field is absent.
            BlockFieldError: a payload field has the wrong type or length.
        """
        # 1. Closed set first, then configured allow-list
        block_type = BlockType.parse(block.block_type)
        if block_type is None or block_type.value not in self.rules.allowed_types:
            raise InvalidBlockTypeError(block.block_type)

        schema = self.rules.schemas.get(block_type.value)
        if not schema:
            return

        # 2. Required fields
        for req_field in schema.required:
            if req_field not in block.data_json:
                raise MissingRequiredFieldError(
                    f"Missing required field '{req_field}' for block type '{block_type.value}'.",
                    field=req_field,
                )

        # 3. Field constraints
        for field, props in schema.properties.items():
            if field in block.data_json:
                self._validate_field(field, block.data_json[field], props)

    def _validate_field(self, field_name: str, value: Any, props: BlockProperty) -> None:
        if value is None:
            if not props.nullable:
                raise BlockFieldError(f"Field '{field_name}' must not be null.", field=field_name)
            return

        if props.type == "string":
            if not isinstance(value, str):
                raise BlockFieldError(f"Field '{field_name}' must be a string.", field=field_name)
            if props.min is not None and len(value) < props.min:
                raise BlockFieldError(
                    f"Field '{field_name}' too short (min {props.min}).", field=field_name
                )
            if props.max is not None and len(value) > props.max:
                raise BlockFieldError(
                    f"Field '{field_name}' too long (max {props.max}).", field=field_name
                )
