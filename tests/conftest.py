# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from itertools import count

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")

from lignum.db.session import Base, enable_sqlite_foreign_keys
from lignum.db.session import get_db as app_get_session
from lignum.main import app as fastapi_app
from lignum.models import Board, BoardColumn, BoardMember, Card, Label, User
from lignum.services.access import AccessGuard
from lignum.services.broadcaster import RoomBroadcaster
from lignum.services.context import MutationContext
from lignum.services.locking import BoardLocks
from tests.helpers import RecordingConnection

TEST_DB_URL = "sqlite://"

_EMAIL_COUNTER = count(1)


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture(scope="session")
def session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )


@pytest.fixture()
def db_session(engine: Engine, session_factory: sessionmaker[Session]) -> Iterator[Session]:
    session = session_factory()
    try:
        yield session
    finally:
        session.rollback()
        session.close()
        # Ensure each test sees a clean database even though handlers commit.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def broadcaster(session_factory: sessionmaker[Session]) -> RoomBroadcaster:
    return RoomBroadcaster(AccessGuard(session_factory))


@pytest.fixture()
def client(
    app: FastAPI,
    broadcaster: RoomBroadcaster,
) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        # Startup built collaborators bound to the runtime engine; use the test ones.
        app.state.broadcaster = broadcaster
        app.state.board_locks = BoardLocks()
        yield test_client


@pytest.fixture()
def make_user(db_session: Session) -> Callable[..., User]:
    def _make_user(name: str = "user", avatar: str | None = None) -> User:
        user = User(
            name=name,
            email=f"{name.lower()}-{next(_EMAIL_COUNTER)}@example.com",
            avatar=avatar,
        )
        db_session.add(user)
        db_session.commit()
        return user

    return _make_user


@pytest.fixture()
def owner(make_user: Callable[..., User]) -> User:
    return make_user("Ana")


@pytest.fixture()
def member(make_user: Callable[..., User]) -> User:
    return make_user("Bruno")


@pytest.fixture()
def outsider(make_user: Callable[..., User]) -> User:
    return make_user("Carla")


@pytest.fixture()
def board(db_session: Session, owner: User, member: User) -> Board:
    """Board owned by ``owner`` with ``member`` invited and three empty columns."""
    board = Board(title="Roadmap", owner_id=owner.id)
    db_session.add(board)
    db_session.flush()
    db_session.add(BoardMember(board_id=board.id, user_id=member.id))
    for index, title in enumerate(["To Do", "In Progress", "Done"]):
        db_session.add(BoardColumn(board_id=board.id, title=title, order_index=index))
    db_session.commit()
    return board


@pytest.fixture()
def columns(db_session: Session, board: Board) -> list[BoardColumn]:
    return (
        db_session.query(BoardColumn)
        .filter(BoardColumn.board_id == board.id)
        .order_by(BoardColumn.order_index)
        .all()
    )


@pytest.fixture()
def make_card(db_session: Session) -> Callable[..., Card]:
    def _make_card(column: BoardColumn, title: str, rank: float) -> Card:
        card = Card(
            column_id=column.id,
            title=title,
            rank_position=rank,
            checklist=[],
            comments=[],
        )
        db_session.add(card)
        db_session.commit()
        return card

    return _make_card


@pytest.fixture()
def make_label(db_session: Session) -> Callable[..., Label]:
    def _make_label(board: Board, title: str = "Bug", color: str = "#FF0000") -> Label:
        label = Label(board_id=board.id, title=title, color=color)
        db_session.add(label)
        db_session.commit()
        return label

    return _make_label


@pytest.fixture()
def watch_board(
    client: TestClient,
    broadcaster: RoomBroadcaster,
) -> Callable[[User, int], RecordingConnection]:
    """Register a recording connection for ``user`` and join it to a board room."""

    def _watch(user: User, board_id: int) -> RecordingConnection:
        connection = RecordingConnection()
        connection_id = broadcaster.register(connection, user.id)
        client.portal.call(broadcaster.join_board_room, connection_id, board_id)
        connection.clear()
        return connection

    return _watch


@pytest.fixture()
def mutation_context(
    db_session: Session,
    broadcaster: RoomBroadcaster,
) -> Callable[[User], MutationContext]:
    locks = BoardLocks()

    def _context(user: User) -> MutationContext:
        return MutationContext(
            db=db_session,
            actor_id=user.id,
            broadcaster=broadcaster,
            locks=locks,
        )

    return _context
