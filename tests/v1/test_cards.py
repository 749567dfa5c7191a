"""Tests for card endpoints."""

import pytest
from fastapi import status

from lignum.models import Board, BoardColumn, Card
from tests.helpers import auth_headers


def test_create_card_appends_to_column(client, board, columns, owner, watch_board) -> None:
    watcher = watch_board(owner, board.id)
    column_id = columns[0].id

    first = client.post(
        "/api/v1/cards",
        json={"columnId": column_id, "title": "Write docs"},
        headers=auth_headers(owner),
    )
    second = client.post(
        "/api/v1/cards",
        json={"columnId": column_id, "title": "Ship it", "priority": "High"},
        headers=auth_headers(owner),
    )

    assert first.status_code == status.HTTP_201_CREATED
    assert first.json()["rankPosition"] == 1000
    assert second.json()["rankPosition"] == 2000
    assert second.json()["priority"] == "High"

    created = watcher.frames("card_created")
    assert [card["title"] for card in created] == ["Write docs", "Ship it"]
    assert created[0]["columnId"] == column_id
    assert created[0]["labels"] == [] and created[0]["attachments"] == []


def test_create_card_requires_board_access(client, columns, outsider) -> None:
    response = client.post(
        "/api/v1/cards",
        json={"columnId": columns[0].id, "title": "Sneaky"},
        headers=auth_headers(outsider),
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_create_card_in_missing_column(client, owner) -> None:
    response = client.post(
        "/api/v1/cards",
        json={"columnId": 4242, "title": "Nowhere"},
        headers=auth_headers(owner),
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_create_card_rejects_empty_title(client, columns, owner) -> None:
    response = client.post(
        "/api/v1/cards",
        json={"columnId": columns[0].id, "title": ""},
        headers=auth_headers(owner),
    )
    assert response.status_code == 422


def test_partial_update_changes_only_sent_fields(
    client, board, columns, owner, member, make_card, watch_board
) -> None:
    card = make_card(columns[0], "Draft", 1000)
    client.patch(
        f"/api/v1/cards/{card.id}",
        json={"description": "Long text", "assignee": "ana"},
        headers=auth_headers(owner),
    )
    watcher = watch_board(owner, board.id)

    response = client.patch(
        f"/api/v1/cards/{card.id}",
        json={"description": None, "completed": True},
        headers=auth_headers(member),
    )

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["description"] is None
    assert data["assignee"] == "ana"
    assert data["title"] == "Draft"
    assert data["completed"] is True
    assert watcher.frames("card_updated") == [data]


def test_put_behaves_like_patch(client, columns, owner, make_card) -> None:
    card = make_card(columns[0], "Draft", 1000)
    response = client.put(
        f"/api/v1/cards/{card.id}",
        json={"title": "Final", "dueDate": "2026-11-01T12:00:00Z"},
        headers=auth_headers(owner),
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["title"] == "Final"
    assert response.json()["dueDate"].startswith("2026-11-01T12:00:00")


def test_clearing_required_field_is_rejected(
    client, board, columns, owner, make_card, watch_board
) -> None:
    card = make_card(columns[0], "Keep me", 1000)
    watcher = watch_board(owner, board.id)

    response = client.patch(
        f"/api/v1/cards/{card.id}",
        json={"title": None},
        headers=auth_headers(owner),
    )

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert watcher.sent == []


def test_checklist_items_get_ids_and_clear_to_empty(client, columns, owner, make_card) -> None:
    card = make_card(columns[0], "Todo", 1000)

    response = client.patch(
        f"/api/v1/cards/{card.id}",
        json={
            "checklist": [
                {"text": "first"},
                {"id": "keep", "text": "second", "isChecked": True},
            ],
            "comments": [{"content": "looks good"}],
        },
        headers=auth_headers(owner),
    )
    data = response.json()
    assert data["checklist"][0]["id"]
    assert data["checklist"][1] == {"id": "keep", "text": "second", "isChecked": True}
    assert data["comments"][0]["authorId"] == owner.id
    assert data["comments"][0]["createdAt"]

    cleared = client.patch(
        f"/api/v1/cards/{card.id}",
        json={"checklist": None},
        headers=auth_headers(owner),
    ).json()
    assert cleared["checklist"] == []
    assert cleared["comments"] == data["comments"]


def test_move_into_empty_column(client, board, columns, owner, make_card, watch_board) -> None:
    todo, _, done = columns
    card = make_card(todo, "C1", 1000)
    watcher = watch_board(owner, board.id)

    response = client.patch(
        f"/api/v1/cards/{card.id}/move",
        json={"newColumnId": done.id},
        headers=auth_headers(owner),
    )

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["columnId"] == done.id
    assert response.json()["rankPosition"] == 1000
    assert watcher.frames("card_moved") == [
        {
            "cardId": card.id,
            "oldColumnId": todo.id,
            "newColumnId": done.id,
            "newRankPosition": 1000.0,
        }
    ]


def test_move_between_neighbours(client, db_session, columns, owner, make_card) -> None:
    todo, doing, _ = columns
    a = make_card(doing, "A", 1000)
    b = make_card(doing, "B", 2000)
    c = make_card(todo, "C", 1000)

    response = client.patch(
        f"/api/v1/cards/{c.id}/move",
        json={"newColumnId": doing.id, "prevCardId": a.id, "nextCardId": b.id},
        headers=auth_headers(owner),
    )

    rank = response.json()["rankPosition"]
    assert 1000 < rank < 2000
    ordered = (
        db_session.query(Card)
        .filter(Card.column_id == doing.id)
        .order_by(Card.rank_position, Card.id)
        .all()
    )
    assert [card.title for card in ordered] == ["A", "C", "B"]


def test_move_to_top_with_only_successor(client, columns, owner, make_card) -> None:
    todo, doing, _ = columns
    first = make_card(doing, "First", 1000)
    card = make_card(todo, "Top", 1000)

    response = client.patch(
        f"/api/v1/cards/{card.id}/move",
        json={"newColumnId": doing.id, "nextCardId": first.id},
        headers=auth_headers(owner),
    )
    assert response.json()["rankPosition"] == 500


def test_move_with_explicit_rank(client, columns, owner, make_card) -> None:
    card = make_card(columns[0], "Exact", 1000)
    response = client.patch(
        f"/api/v1/cards/{card.id}/move",
        json={"newColumnId": columns[1].id, "newRankPosition": 1234.5},
        headers=auth_headers(owner),
    )
    assert response.json()["rankPosition"] == 1234.5


def test_neighbours_take_precedence_over_explicit_rank(
    client, db_session, columns, owner, make_card
) -> None:
    todo, doing, _ = columns
    a = make_card(doing, "A", 1000)
    b = make_card(doing, "B", 2000)
    c = make_card(todo, "C", 1000)

    response = client.patch(
        f"/api/v1/cards/{c.id}/move",
        json={
            "newColumnId": doing.id,
            "prevCardId": a.id,
            "nextCardId": b.id,
            "newRankPosition": 99999,
        },
        headers=auth_headers(owner),
    )

    assert response.json()["rankPosition"] == 1500
    ordered = (
        db_session.query(Card)
        .filter(Card.column_id == doing.id)
        .order_by(Card.rank_position, Card.id)
        .all()
    )
    assert [card.title for card in ordered] == ["A", "C", "B"]


@pytest.mark.parametrize("raw_rank", ["NaN", "Infinity", "-Infinity"])
def test_move_rejects_non_finite_rank(
    client, db_session, columns, owner, make_card, watch_board, board, raw_rank
) -> None:
    card = make_card(columns[0], "Steady", 1000)
    watcher = watch_board(owner, board.id)

    response = client.patch(
        f"/api/v1/cards/{card.id}/move",
        content=f'{{"newColumnId": {columns[1].id}, "newRankPosition": {raw_rank}}}',
        headers={**auth_headers(owner), "Content-Type": "application/json"},
    )

    assert response.status_code == 422
    assert watcher.sent == []
    db_session.expire_all()
    stored = db_session.get(Card, card.id)
    assert (stored.column_id, stored.rank_position) == (columns[0].id, 1000)


def test_move_rejects_inverted_neighbours(client, columns, owner, make_card) -> None:
    todo, doing, _ = columns
    a = make_card(doing, "A", 1000)
    b = make_card(doing, "B", 2000)
    c = make_card(todo, "C", 1000)

    response = client.patch(
        f"/api/v1/cards/{c.id}/move",
        json={"newColumnId": doing.id, "prevCardId": b.id, "nextCardId": a.id},
        headers=auth_headers(owner),
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_move_rejects_foreign_neighbour(client, columns, owner, make_card) -> None:
    todo, doing, _ = columns
    elsewhere = make_card(todo, "Elsewhere", 1000)
    card = make_card(todo, "Mover", 2000)

    response = client.patch(
        f"/api/v1/cards/{card.id}/move",
        json={"newColumnId": doing.id, "prevCardId": elsewhere.id},
        headers=auth_headers(owner),
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_move_across_boards_is_rejected(
    client, db_session, columns, owner, make_card
) -> None:
    other = Board(title="Other", owner_id=owner.id)
    db_session.add(other)
    db_session.flush()
    foreign = BoardColumn(board_id=other.id, title="Elsewhere", order_index=0)
    db_session.add(foreign)
    db_session.commit()
    card = make_card(columns[0], "Stay", 1000)

    response = client.patch(
        f"/api/v1/cards/{card.id}/move",
        json={"newColumnId": foreign.id},
        headers=auth_headers(owner),
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_delete_card_is_idempotent(client, board, columns, owner, make_card, watch_board) -> None:
    card = make_card(columns[0], "Bye", 1000)
    watcher = watch_board(owner, board.id)

    first = client.delete(f"/api/v1/cards/{card.id}", headers=auth_headers(owner))
    second = client.delete(f"/api/v1/cards/{card.id}", headers=auth_headers(owner))

    assert first.status_code == status.HTTP_204_NO_CONTENT
    assert second.status_code == status.HTTP_204_NO_CONTENT
    assert watcher.frames("card_deleted") == [{"cardId": card.id, "columnId": columns[0].id}]
    assert len(watcher.sent) == 1


def test_mutations_require_token(client, columns) -> None:
    response = client.post("/api/v1/cards", json={"columnId": columns[0].id, "title": "x"})
    assert response.status_code in (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN)
