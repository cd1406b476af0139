"""Repository tests against the in-memory container"""

import asyncio

import pytest
import pytest_asyncio
from unittest.mock import patch

from unmatched_stats.database.exceptions import DuplicateItemError, DatabaseError
from unmatched_stats.exceptions import NotFoundError, ValidationError
from unmatched_stats.models.game import GameCreate, GameEntry
from unmatched_stats.models.player import PlayerCreate, PlayerUpdate
from unmatched_stats.models.user import User
from unmatched_stats.repositories import GameRepository
from unmatched_stats.repositories.user_repository import reservation_id

from azure.cosmos.exceptions import CosmosHttpResponseError


class TestUserRepository:
    """Test cases for UserRepository"""

    @pytest.mark.asyncio
    async def test_create_and_lookup(self, user_repo):
        user = await user_repo.create_user(User(username="alice", email="a@x.com", password_hash="h"))

        assert (await user_repo.get_user_by_id(user.id)).username == "alice"
        assert (await user_repo.get_user_by_username("alice")).id == user.id
        assert (await user_repo.get_user_by_email("A@X.com")).id == user.id

    @pytest.mark.asyncio
    async def test_duplicate_username(self, user_repo):
        await user_repo.create_user(User(username="alice", email="a@x.com", password_hash="h"))

        with pytest.raises(DuplicateItemError):
            await user_repo.create_user(User(username="alice", email="other@x.com", password_hash="h"))

    @pytest.mark.asyncio
    async def test_duplicate_email(self, user_repo):
        await user_repo.create_user(User(username="alice", email="a@x.com", password_hash="h"))

        with pytest.raises(DuplicateItemError):
            await user_repo.create_user(User(username="bob", email="a@x.com", password_hash="h"))

    @pytest.mark.asyncio
    async def test_concurrent_registrations_store_one_user(self, user_repo, cosmos_db, settings):
        results = await asyncio.gather(
            user_repo.create_user(User(username="alice", email="a1@x.com", password_hash="h")),
            user_repo.create_user(User(username="alice", email="a2@x.com", password_hash="h")),
            return_exceptions=True,
        )

        assert sum(isinstance(result, DuplicateItemError) for result in results) == 1
        users = cosmos_db.get_container(settings.cosmos_container_users).items.values()
        assert len([doc for doc in users if doc.get("username") == "alice"]) == 1

    @pytest.mark.asyncio
    async def test_failed_registration_releases_username(self, user_repo):
        await user_repo.create_user(User(username="alice", email="a@x.com", password_hash="h"))

        # Lookups miss, as they do when two registrations race
        with patch.object(user_repo, "get_user_by_email", return_value=None):
            with pytest.raises(DuplicateItemError):
                await user_repo.create_user(User(username="bob", email="a@x.com", password_hash="h"))

        bob = await user_repo.create_user(User(username="bob", email="b@x.com", password_hash="h"))
        assert (await user_repo.get_user_by_username("bob")).id == bob.id

    @pytest.mark.asyncio
    async def test_reservations_are_not_users(self, user_repo):
        await user_repo.create_user(User(username="alice", email="a@x.com", password_hash="h"))

        assert await user_repo.get_user_by_id(reservation_id("username", "alice")) is None

    @pytest.mark.asyncio
    async def test_unknown_user(self, user_repo):
        assert await user_repo.get_user_by_id("not-a-uuid") is None
        assert await user_repo.get_user_by_username("nobody") is None


class TestPlayerRepository:

    @pytest.mark.asyncio
    async def test_create_applies_defaults(self, player_repo):
        player = await player_repo.create_player(PlayerCreate(name="Sam"))

        assert player.games_played == 0
        assert player.wins == 0
        assert player.owner_id is None

    @pytest.mark.asyncio
    async def test_list_scoped_to_owner(self, player_repo):
        await player_repo.create_player(PlayerCreate(name="Mine"), owner_id="u1")
        await player_repo.create_player(PlayerCreate(name="Theirs"), owner_id="u2")

        mine = await player_repo.list_players("u1")
        everything = await player_repo.list_players()

        assert [p.name for p in mine] == ["Mine"]
        assert len(everything) == 2

    @pytest.mark.asyncio
    async def test_get_other_owners_player_is_not_found(self, player_repo):
        player = await player_repo.create_player(PlayerCreate(name="Theirs"), owner_id="u2")

        with pytest.raises(NotFoundError, match="Player not found"):
            await player_repo.get_player(player.id, owner_id="u1")

    @pytest.mark.asyncio
    async def test_get_invalid_id_is_not_found(self, player_repo):
        with pytest.raises(NotFoundError):
            await player_repo.get_player("abc")

    @pytest.mark.asyncio
    async def test_update_merges_fields(self, player_repo):
        player = await player_repo.create_player(PlayerCreate(name="Sam", games_played=4, wins=1))

        updated = await player_repo.update_player(player.id, PlayerUpdate(favorite_character="Medusa"))

        assert updated.favorite_character == "Medusa"
        assert updated.name == "Sam"
        assert updated.games_played == 4

    @pytest.mark.asyncio
    async def test_update_patches_only_sent_fields(self, player_repo, players_container):
        player = await player_repo.create_player(PlayerCreate(name="Sam"))

        await player_repo.update_player(player.id, PlayerUpdate(name="Samwise"))

        assert players_container.patch_calls[-1]["operations"] == [
            {"op": "set", "path": "/name", "value": "Samwise"}
        ]

    @pytest.mark.asyncio
    async def test_update_rejects_wins_above_games(self, player_repo):
        player = await player_repo.create_player(PlayerCreate(name="Sam", games_played=2, wins=1))

        with pytest.raises(ValidationError):
            await player_repo.update_player(player.id, PlayerUpdate(wins=3))

    @pytest.mark.asyncio
    async def test_update_missing_player(self, player_repo):
        with pytest.raises(NotFoundError):
            await player_repo.update_player("5d4c2a1e-0000-4000-8000-000000000000", PlayerUpdate(name="X"))

    @pytest.mark.asyncio
    async def test_increment_is_a_single_patch(self, player_repo, players_container):
        player = await player_repo.create_player(PlayerCreate(name="Sam"))

        assert await player_repo.increment_stats(player.id, win_delta=1, play_delta=1)

        assert players_container.patch_calls == [{
            "id": player.id,
            "operations": [
                {"op": "incr", "path": "/wins", "value": 1},
                {"op": "incr", "path": "/gamesPlayed", "value": 1},
            ],
        }]
        stored = await player_repo.get_player(player.id)
        assert (stored.wins, stored.games_played) == (1, 1)

    @pytest.mark.asyncio
    async def test_increment_unknown_player(self, player_repo, players_container):
        assert not await player_repo.increment_stats("not-a-uuid", play_delta=1)
        assert not await player_repo.increment_stats("5d4c2a1e-0000-4000-8000-000000000000", play_delta=1)
        assert players_container.patch_calls == []

    @pytest.mark.asyncio
    async def test_query_error_is_wrapped(self, player_repo, players_container):
        with patch.object(
            players_container, "query_items",
            side_effect=CosmosHttpResponseError(status_code=500, message="boom"),
        ):
            with pytest.raises(DatabaseError):
                await player_repo.list_players()


class TestGameRepository:

    @pytest_asyncio.fixture
    async def players(self, player_repo):
        first = await player_repo.create_player(PlayerCreate(name="Ann"))
        second = await player_repo.create_player(PlayerCreate(name="Ben"))
        return first, second

    @pytest.mark.asyncio
    async def test_create_defaults_date(self, game_repo):
        game = await game_repo.create_game(GameCreate())

        assert game.date is not None
        assert game.players == []

    @pytest.mark.asyncio
    async def test_get_resolves_players(self, game_repo, players):
        ann, ben = players
        game = await game_repo.create_game(GameCreate(
            players=[GameEntry(player=ann.id, character="Alice"), GameEntry(player=ben.id, character="Medusa")],
            winner=ann.id,
            notes="close one",
        ))

        detail = await game_repo.get_game(game.id)

        assert detail.winner.name == "Ann"
        assert [entry.player.name for entry in detail.players] == ["Ann", "Ben"]
        assert detail.players[1].character == "Medusa"

    @pytest.mark.asyncio
    async def test_dangling_reference_resolves_to_none(self, game_repo):
        game = await game_repo.create_game(GameCreate(
            players=[GameEntry(player="ghost", character="Alice")],
            winner="ghost",
        ))

        detail = await game_repo.get_game(game.id)

        assert detail.winner is None
        assert detail.players[0].player is None
        assert detail.players[0].character == "Alice"

    @pytest.mark.asyncio
    async def test_each_player_fetched_once(self, game_repo, player_repo, players):
        ann, ben = players
        for _ in range(3):
            await game_repo.create_game(GameCreate(
                players=[GameEntry(player=ann.id, character="Alice"), GameEntry(player=ben.id, character="Medusa")],
                winner=ann.id,
            ))

        with patch.object(player_repo, "find_player", wraps=player_repo.find_player) as find_player:
            games = await game_repo.list_games()

        assert len(games) == 3
        assert find_player.call_count == 2

    @pytest.mark.asyncio
    async def test_scoped_get(self, game_repo):
        game = await game_repo.create_game(GameCreate(), owner_id="u2")

        with pytest.raises(NotFoundError, match="Game not found"):
            await game_repo.get_game(game.id, owner_id="u1")

    @pytest.mark.asyncio
    async def test_winner_outside_players_allowed_by_default(self, game_repo, players):
        ann, ben = players
        game = await game_repo.create_game(GameCreate(
            players=[GameEntry(player=ann.id, character="Alice")],
            winner=ben.id,
        ))

        assert game.winner == ben.id

    @pytest.mark.asyncio
    async def test_reference_validation(self, cosmos_db, player_repo, players):
        ann, ben = players
        strict = GameRepository(cosmos_db, player_repo, validate_references=True)

        with pytest.raises(ValidationError, match="Winner"):
            await strict.create_game(GameCreate(
                players=[GameEntry(player=ann.id, character="Alice")],
                winner=ben.id,
            ))

        with pytest.raises(ValidationError, match="Unknown player ids"):
            await strict.create_game(GameCreate(
                players=[GameEntry(player=ann.id, character="Alice"), GameEntry(player="ghost", character="Sinbad")],
            ))

    @pytest.mark.asyncio
    async def test_scoped_view_hides_other_owners_players(self, game_repo, player_repo):
        mine = await player_repo.create_player(PlayerCreate(name="Mine"), owner_id="u1")
        theirs = await player_repo.create_player(PlayerCreate(name="Theirs"), owner_id="u2")
        game = await game_repo.create_game(GameCreate(
            players=[GameEntry(player=mine.id, character="Alice"), GameEntry(player=theirs.id, character="Medusa")],
            winner=theirs.id,
        ), owner_id="u1")

        detail = await game_repo.get_game(game.id, owner_id="u1")

        assert detail.players[0].player.name == "Mine"
        assert detail.players[1].player is None
        assert detail.winner is None
        listed = await game_repo.list_games(owner_id="u1")
        assert listed[0].players[1].player is None
