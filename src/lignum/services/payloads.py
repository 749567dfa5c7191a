"""Canonical payloads built from rows re-read after commit.

Responses and events are always built here, so a client can apply them
without any prior knowledge of the entity, and they match what a later
snapshot returns for the same rows.
"""

from __future__ import annotations

from typing import TypeVar

from sqlalchemy.orm import Session

from lignum.models import (
    Attachment,
    Board,
    BoardColumn,
    BoardMember,
    Card,
    CardLabel,
    ChatMessage,
    Label,
    User,
)
from lignum.schemas.attachment import AttachmentResponse
from lignum.schemas.board import BoardSnapshot, BoardSummary
from lignum.schemas.card import CardComment, CardResponse, ChecklistItem
from lignum.schemas.chat import ChatMessageResponse
from lignum.schemas.column import ColumnPosition, ColumnResponse, ColumnWithCards
from lignum.schemas.label import LabelResponse
from lignum.schemas.user import MemberSummary

RowT = TypeVar("RowT")


def refreshed(db: Session, row: RowT) -> RowT:
    """Reload ``row`` from the database, discarding in-memory values."""
    db.refresh(row)
    return row


def label_payload(label: Label) -> LabelResponse:
    return LabelResponse.model_validate(label)


def attachment_payload(attachment: Attachment) -> AttachmentResponse:
    return AttachmentResponse.model_validate(attachment)


def column_payload(column: BoardColumn) -> ColumnResponse:
    return ColumnResponse.model_validate(column)


def card_payload(db: Session, card: Card) -> CardResponse:
    """Full card with labels and attachments read straight from the tables."""
    labels = (
        db.query(Label)
        .join(CardLabel, CardLabel.label_id == Label.id)
        .filter(CardLabel.card_id == card.id)
        .order_by(Label.id)
        .populate_existing()
        .all()
    )
    attachments = (
        db.query(Attachment)
        .filter(Attachment.card_id == card.id)
        .order_by(Attachment.id)
        .populate_existing()
        .all()
    )
    return CardResponse(
        id=card.id,
        column_id=card.column_id,
        title=card.title,
        description=card.description,
        rank_position=card.rank_position,
        priority=card.priority,
        due_date=card.due_date,
        assignee=card.assignee,
        hex_color=card.hex_color,
        completed=card.completed,
        checklist=[ChecklistItem.model_validate(item) for item in card.checklist or []],
        comments=[CardComment.model_validate(item) for item in card.comments or []],
        labels=[label_payload(label) for label in labels],
        attachments=[attachment_payload(item) for item in attachments],
        created_at=card.created_at,
    )


def ordered_cards(db: Session, column_id: int) -> list[Card]:
    return (
        db.query(Card)
        .filter(Card.column_id == column_id)
        .order_by(Card.rank_position, Card.id)
        .populate_existing()
        .all()
    )


def ordered_columns(db: Session, board_id: int) -> list[BoardColumn]:
    return (
        db.query(BoardColumn)
        .filter(BoardColumn.board_id == board_id)
        .order_by(BoardColumn.order_index, BoardColumn.id)
        .populate_existing()
        .all()
    )


def column_positions(db: Session, board_id: int) -> list[ColumnPosition]:
    return [
        ColumnPosition(id=column.id, order_index=column.order_index)
        for column in ordered_columns(db, board_id)
    ]


def columns_with_cards(db: Session, board_id: int) -> list[ColumnWithCards]:
    result = []
    for column in ordered_columns(db, board_id):
        cards = [card_payload(db, card) for card in ordered_cards(db, column.id)]
        result.append(
            ColumnWithCards(**column_payload(column).model_dump(), cards=cards)
        )
    return result


def member_summaries(db: Session, board: Board) -> list[MemberSummary]:
    """Owner first, then members in the order they were added."""
    users = [db.get(User, board.owner_id)]
    users.extend(
        db.query(User)
        .join(BoardMember, BoardMember.user_id == User.id)
        .filter(BoardMember.board_id == board.id, User.id != board.owner_id)
        .order_by(BoardMember.added_at, User.id)
        .all()
    )
    return [MemberSummary.model_validate(user) for user in users if user is not None]


def board_summary(db: Session, board: Board) -> BoardSummary:
    return BoardSummary(
        id=board.id,
        title=board.title,
        owner_id=board.owner_id,
        background_color=board.background_color,
        created_at=board.created_at,
        members=member_summaries(db, board),
    )


def board_snapshot(db: Session, board: Board) -> BoardSnapshot:
    labels = db.query(Label).filter(Label.board_id == board.id).order_by(Label.id).all()
    return BoardSnapshot(
        id=board.id,
        title=board.title,
        owner_id=board.owner_id,
        background_color=board.background_color,
        created_at=board.created_at,
        columns=columns_with_cards(db, board.id),
        labels=[label_payload(label) for label in labels],
        members=member_summaries(db, board),
    )


def chat_payload(message: ChatMessage) -> ChatMessageResponse:
    return ChatMessageResponse(
        id=message.id,
        board_id=message.board_id,
        author_id=message.author_id,
        author_name=message.author.name,
        author_avatar=message.author.avatar,
        content=message.content,
        pinned=message.pinned,
        created_at=message.created_at,
    )
