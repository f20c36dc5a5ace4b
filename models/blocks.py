"""Block model — the ordered sequence of content blocks a document is built from.

Each block type is its own frozen model carrying a ``type`` discriminator.
``DocumentState`` owns the sequence and is the only thing that mutates it;
every operation replaces blocks with updated copies and renumbers ``order``
before returning, so a snapshot taken for an export never changes underneath
the renderer.
"""
import logging
import uuid
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)

BlockType = Literal["paragraph", "heading", "list", "quote", "image"]

# Fields a patch may never touch: identity, position and variant
_PROTECTED_FIELDS = frozenset({"id", "order", "type"})


def _new_block_id() -> str:
    return uuid.uuid4().hex


class _BlockBase(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: str = Field(default_factory=_new_block_id)
    order: int = Field(default=0, ge=0)


class ParagraphBlock(_BlockBase):
    type: Literal["paragraph"] = "paragraph"
    content: str = ""


class HeadingBlock(_BlockBase):
    type: Literal["heading"] = "heading"
    content: str = ""
    level: int = Field(default=2, ge=1, le=3)


class ListBlock(_BlockBase):
    type: Literal["list"] = "list"
    items: tuple[str, ...] = ("",)

    @field_validator("items")
    @classmethod
    def never_empty(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        return v or ("",)


class QuoteBlock(_BlockBase):
    type: Literal["quote"] = "quote"
    content: str = ""


class ImageBlock(_BlockBase):
    type: Literal["image"] = "image"
    image_url: str = ""


Block = Annotated[
    Union[ParagraphBlock, HeadingBlock, ListBlock, QuoteBlock, ImageBlock],
    Field(discriminator="type"),
]

_BLOCK_ADAPTER = TypeAdapter(Block)
_BLOCK_LIST_ADAPTER = TypeAdapter(list[Block])


def new_block(block_type: BlockType, order: int = 0) -> Block:
    """Create a block of ``block_type`` with default content and a fresh id."""
    return _BLOCK_ADAPTER.validate_python({"type": block_type, "order": order})


def parse_blocks(data: list[dict[str, Any]]) -> tuple[Block, ...]:
    """Validate a JSON-like list of block dicts into block models."""
    return tuple(_BLOCK_LIST_ADAPTER.validate_python(data))


def _renumber(blocks: list[Block]) -> list[Block]:
    return [
        block if block.order == index else block.model_copy(update={"order": index})
        for index, block in enumerate(blocks)
    ]


class DocumentState:
    """Owner of a document's block sequence.

    Unknown ids and stale indices are silent no-ops: they arise benignly when
    UI events arrive out of order.
    """

    def __init__(self, blocks: list[Block] | tuple[Block, ...] = ()) -> None:
        self._blocks: list[Block] = _renumber(list(blocks))

    @property
    def blocks(self) -> tuple[Block, ...]:
        return tuple(self._blocks)

    def __len__(self) -> int:
        return len(self._blocks)

    def snapshot(self) -> tuple[Block, ...]:
        """Point-in-time view for an export. Later edits do not affect it."""
        return tuple(self._blocks)

    def index_of(self, block_id: str) -> int | None:
        for index, block in enumerate(self._blocks):
            if block.id == block_id:
                return index
        return None

    def find(self, block_id: str) -> Block | None:
        index = self.index_of(block_id)
        return None if index is None else self._blocks[index]

    # ------------------------------------------------------------------
    # Sequence operations
    # ------------------------------------------------------------------

    def insert(self, block_type: BlockType, after_index: int | None = None) -> tuple[Block, ...]:
        """Insert a new default block after ``after_index`` (append when omitted).

        ``after_index=-1`` inserts at the top; an index past the end appends.
        """
        if after_index is None:
            position = len(self._blocks)
        else:
            position = min(max(after_index + 1, 0), len(self._blocks))
        blocks = list(self._blocks)
        blocks.insert(position, new_block(block_type, order=position))
        self._blocks = _renumber(blocks)
        logger.debug("Inserted %s block at position %d", block_type, position)
        return self.blocks

    def update(self, block_id: str, patch: dict[str, Any]) -> tuple[Block, ...]:
        """Merge ``patch`` into the block with ``block_id``. Order is untouched."""
        index = self.index_of(block_id)
        if index is None:
            logger.debug("update: unknown block id %s ignored", block_id)
            return self.blocks
        changes = {k: v for k, v in patch.items() if k not in _PROTECTED_FIELDS}
        if not changes:
            return self.blocks
        current = self._blocks[index]
        updated = type(current).model_validate({**current.model_dump(), **changes})
        blocks = list(self._blocks)
        blocks[index] = updated
        self._blocks = blocks
        return self.blocks

    def delete(self, block_id: str) -> tuple[Block, ...]:
        remaining = [block for block in self._blocks if block.id != block_id]
        if len(remaining) == len(self._blocks):
            logger.debug("delete: unknown block id %s ignored", block_id)
            return self.blocks
        self._blocks = _renumber(remaining)
        return self.blocks

    def move(self, from_index: int, to_index: int) -> tuple[Block, ...]:
        """Splice the block at ``from_index`` out and back in at ``to_index``."""
        if not 0 <= from_index < len(self._blocks):
            logger.debug("move: stale index %d ignored", from_index)
            return self.blocks
        blocks = list(self._blocks)
        moved = blocks.pop(from_index)
        blocks.insert(min(max(to_index, 0), len(blocks)), moved)
        self._blocks = _renumber(blocks)
        return self.blocks

    # ------------------------------------------------------------------
    # List-item operations
    # ------------------------------------------------------------------

    def _list_block(self, block_id: str) -> ListBlock | None:
        block = self.find(block_id)
        if not isinstance(block, ListBlock):
            logger.debug("List operation on non-list or unknown block %s ignored", block_id)
            return None
        return block

    def update_list_item(self, block_id: str, item_index: int, text: str) -> tuple[Block, ...]:
        block = self._list_block(block_id)
        if block is None or not 0 <= item_index < len(block.items):
            return self.blocks
        items = list(block.items)
        items[item_index] = text
        return self.update(block_id, {"items": tuple(items)})

    def delete_list_item(self, block_id: str, item_index: int) -> tuple[Block, ...]:
        """Remove one item. Removing the last item leaves a single empty item."""
        block = self._list_block(block_id)
        if block is None or not 0 <= item_index < len(block.items):
            return self.blocks
        items = block.items[:item_index] + block.items[item_index + 1:]
        return self.update(block_id, {"items": items or ("",)})

    def append_list_item(self, block_id: str, text: str = "") -> tuple[Block, ...]:
        block = self._list_block(block_id)
        if block is None:
            return self.blocks
        return self.update(block_id, {"items": block.items + (text,)})
