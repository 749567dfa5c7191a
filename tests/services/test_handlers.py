"""Tests for mutation handlers driven directly, without HTTP."""

import asyncio

import pytest
from sqlalchemy.exc import OperationalError

from lignum.models import BoardColumn, Card
from lignum.schemas.card import CardCreate, CardMove
from lignum.schemas.column import ColumnMove
from lignum.services import cards as card_service
from lignum.services import columns as column_service
from lignum.services.errors import PersistenceError
from tests.helpers import RecordingConnection


async def _watch(broadcaster, user, board_id) -> RecordingConnection:
    connection = RecordingConnection()
    connection_id = broadcaster.register(connection, user.id)
    await broadcaster.join_board_room(connection_id, board_id)
    connection.clear()
    return connection


@pytest.mark.asyncio
async def test_failed_commit_rolls_back_and_broadcasts_nothing(
    mocker, db_session, broadcaster, mutation_context, board, columns, owner, caplog
) -> None:
    watcher = await _watch(broadcaster, owner, board.id)
    mocker.patch.object(
        db_session,
        "commit",
        side_effect=OperationalError("COMMIT", {}, Exception("disk I/O error")),
    )

    with pytest.raises(PersistenceError):
        await card_service.create_card(
            mutation_context(owner), CardCreate(column_id=columns[0].id, title="Lost")
        )

    mocker.stopall()
    assert db_session.query(Card).count() == 0
    assert watcher.sent == []
    assert "rolled back" in caplog.text


@pytest.mark.asyncio
async def test_concurrent_creates_get_distinct_ranks(
    db_session, mutation_context, board, columns, owner, member
) -> None:
    column_id = columns[0].id
    await asyncio.gather(
        *(
            card_service.create_card(
                mutation_context(user), CardCreate(column_id=column_id, title=f"Card {i}")
            )
            for i, user in enumerate([owner, member, owner, member])
        )
    )

    ranks = [
        card.rank_position
        for card in db_session.query(Card).filter(Card.column_id == column_id).all()
    ]
    assert sorted(ranks) == [1000, 2000, 3000, 4000]


@pytest.mark.asyncio
async def test_move_into_exhausted_gap_rebalances_column(
    db_session, broadcaster, mutation_context, make_card, board, columns, owner
) -> None:
    todo, _, done = columns
    first = make_card(done, "First", 1.0)
    second = make_card(done, "Second", 1.0 + 1e-9)
    moving = make_card(todo, "Moving", 1000)
    watcher = await _watch(broadcaster, owner, board.id)

    result = await card_service.move_card(
        mutation_context(owner),
        moving.id,
        CardMove(new_column_id=done.id, prev_card_id=first.id, next_card_id=second.id),
    )

    assert watcher.events == ["column_rebalanced", "card_moved"]
    rebalanced = watcher.frames("column_rebalanced")[0]
    assert rebalanced["columnId"] == done.id
    assert rebalanced["cards"] == [
        {"cardId": first.id, "rankPosition": 1000.0},
        {"cardId": second.id, "rankPosition": 2000.0},
    ]
    assert result.rank_position == 1500
    assert watcher.frames("card_moved")[0]["newRankPosition"] == 1500

    ordered = (
        db_session.query(Card)
        .filter(Card.column_id == done.id)
        .order_by(Card.rank_position, Card.id)
        .all()
    )
    assert [card.id for card in ordered] == [first.id, moving.id, second.id]


@pytest.mark.asyncio
async def test_concurrent_column_moves_keep_indexes_dense(
    db_session, broadcaster, mutation_context, board, columns, owner, member
) -> None:
    todo, doing, done = columns
    extra = BoardColumn(board_id=board.id, title="Blocked", order_index=3)
    db_session.add(extra)
    db_session.commit()
    watcher = await _watch(broadcaster, owner, board.id)

    await asyncio.gather(
        column_service.move_column(mutation_context(owner), done.id, ColumnMove(new_position=0)),
        column_service.move_column(mutation_context(member), todo.id, ColumnMove(new_position=3)),
        column_service.move_column(mutation_context(owner), extra.id, ColumnMove(new_position=1)),
        column_service.move_column(mutation_context(member), doing.id, ColumnMove(new_position=2)),
    )

    db_session.expire_all()
    stored = (
        db_session.query(BoardColumn)
        .filter(BoardColumn.board_id == board.id)
        .order_by(BoardColumn.order_index)
        .all()
    )
    assert [column.order_index for column in stored] == [0, 1, 2, 3]
    assert {column.id for column in stored} == {todo.id, doing.id, done.id, extra.id}

    # The last broadcast order is the persisted order.
    last_move = watcher.frames("column_moved")[-1]
    assert [entry["id"] for entry in last_move["columns"]] == [column.id for column in stored]


@pytest.mark.asyncio
async def test_concurrent_moves_into_one_gap_get_distinct_ordered_ranks(
    db_session, mutation_context, make_card, board, columns, owner, member
) -> None:
    todo, _, done = columns
    a = make_card(done, "A", 1000)
    b = make_card(done, "B", 2000)
    movers = [make_card(todo, f"Mover {i}", 1000 * (i + 1)) for i in range(3)]

    await asyncio.gather(
        *(
            card_service.move_card(
                mutation_context(user),
                card.id,
                CardMove(new_column_id=done.id, prev_card_id=a.id, next_card_id=b.id),
            )
            for card, user in zip(movers, [owner, member, owner])
        )
    )

    db_session.expire_all()
    ordered = (
        db_session.query(Card)
        .filter(Card.column_id == done.id)
        .order_by(Card.rank_position, Card.id)
        .all()
    )
    ranks = [card.rank_position for card in ordered]
    assert len(set(ranks)) == len(ranks) == 5
    assert ordered[0].id == a.id
    assert ordered[-1].id == b.id
    assert all(1000 < rank < 2000 for rank in ranks[1:-1])
    assert {card.id for card in ordered[1:-1]} == {card.id for card in movers}
