"""Tests for column endpoints."""

from fastapi import status

from lignum.models import BoardColumn, Card
from tests.helpers import auth_headers


def _order(db_session, board_id) -> list[tuple[str, int]]:
    db_session.expire_all()
    columns = (
        db_session.query(BoardColumn)
        .filter(BoardColumn.board_id == board_id)
        .order_by(BoardColumn.order_index)
        .all()
    )
    return [(column.title, column.order_index) for column in columns]


def test_list_columns_with_ranked_cards(client, board, columns, member, make_card) -> None:
    make_card(columns[0], "Later", 2000)
    make_card(columns[0], "Sooner", 1000)

    response = client.get(
        "/api/v1/columns", params={"boardId": board.id}, headers=auth_headers(member)
    )

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert [column["title"] for column in data] == ["To Do", "In Progress", "Done"]
    assert [card["title"] for card in data[0]["cards"]] == ["Sooner", "Later"]


def test_list_columns_forbidden_for_outsider(client, board, outsider) -> None:
    response = client.get(
        "/api/v1/columns", params={"boardId": board.id}, headers=auth_headers(outsider)
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_create_column_appends(client, db_session, board, columns, owner, watch_board) -> None:
    watcher = watch_board(owner, board.id)

    response = client.post(
        "/api/v1/columns",
        json={"boardId": board.id, "title": "Review", "hexColor": "#00FF00"},
        headers=auth_headers(owner),
    )

    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["orderIndex"] == 3
    assert watcher.frames("column_created") == [response.json()]
    assert [index for _, index in _order(db_session, board.id)] == [0, 1, 2, 3]


def test_update_column(client, board, columns, owner, watch_board) -> None:
    watcher = watch_board(owner, board.id)

    response = client.patch(
        f"/api/v1/columns/{columns[1].id}",
        json={"title": "Doing"},
        headers=auth_headers(owner),
    )

    assert response.json()["title"] == "Doing"
    assert response.json()["orderIndex"] == 1
    assert watcher.events == ["column_updated"]


def test_move_last_column_to_front(
    client, db_session, board, columns, owner, watch_board
) -> None:
    watcher = watch_board(owner, board.id)
    todo, doing, done = columns

    response = client.patch(
        f"/api/v1/columns/{done.id}/move",
        json={"newPosition": 0},
        headers=auth_headers(owner),
    )

    assert response.status_code == status.HTTP_200_OK
    assert [column["id"] for column in response.json()] == [done.id, todo.id, doing.id]
    assert _order(db_session, board.id) == [("Done", 0), ("To Do", 1), ("In Progress", 2)]
    assert watcher.frames("column_moved") == [
        {
            "columnId": done.id,
            "boardId": board.id,
            "oldPosition": 2,
            "newPosition": 0,
            "columns": [
                {"id": done.id, "orderIndex": 0},
                {"id": todo.id, "orderIndex": 1},
                {"id": doing.id, "orderIndex": 2},
            ],
        }
    ]


def test_move_first_column_forward(client, db_session, board, columns, owner) -> None:
    client.patch(
        f"/api/v1/columns/{columns[0].id}/move",
        json={"newPosition": 1},
        headers=auth_headers(owner),
    )
    assert _order(db_session, board.id) == [("In Progress", 0), ("To Do", 1), ("Done", 2)]


def test_move_out_of_range_is_rejected(
    client, db_session, board, columns, owner, watch_board
) -> None:
    watcher = watch_board(owner, board.id)

    response = client.patch(
        f"/api/v1/columns/{columns[0].id}/move",
        json={"newPosition": 3},
        headers=auth_headers(owner),
    )

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert _order(db_session, board.id) == [("To Do", 0), ("In Progress", 1), ("Done", 2)]
    assert watcher.sent == []


def test_move_to_same_position_changes_nothing(client, board, columns, owner, watch_board) -> None:
    watcher = watch_board(owner, board.id)
    response = client.patch(
        f"/api/v1/columns/{columns[1].id}/move",
        json={"newPosition": 1},
        headers=auth_headers(owner),
    )
    assert response.status_code == status.HTTP_200_OK
    assert watcher.sent == []


def test_delete_column_closes_gap_and_removes_cards(
    client, db_session, board, columns, owner, make_card, watch_board
) -> None:
    make_card(columns[0], "Gone with column", 1000)
    watcher = watch_board(owner, board.id)

    first = client.delete(f"/api/v1/columns/{columns[0].id}", headers=auth_headers(owner))
    second = client.delete(f"/api/v1/columns/{columns[0].id}", headers=auth_headers(owner))

    assert first.status_code == status.HTTP_204_NO_CONTENT
    assert second.status_code == status.HTTP_204_NO_CONTENT
    assert _order(db_session, board.id) == [("In Progress", 0), ("Done", 1)]
    assert db_session.query(Card).count() == 0
    assert watcher.frames("column_deleted") == [
        {"columnId": columns[0].id, "boardId": board.id}
    ]
    assert len(watcher.sent) == 1
