"""
Biodex Backend - Species Service Tests
=======================================

What:  Unit tests for SpeciesService with a mocked database session.
How:   `db.execute` returns MagicMock results shaped like SQLAlchemy's
       (`scalars().all()`, `scalar_one_or_none()`, `rowcount`); rows are
       SimpleNamespace objects read through `from_attributes`.
"""

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from app.exceptions import DatabaseError, NotFoundError
from app.models.species import Kingdom, Species
from app.schemas.species import validate_species
from app.services.species_service import SpeciesService


def _row(**overrides):
    data = {
        "id": 1,
        "scientific_name": "Panthera leo",
        "common_name": "Lion",
        "kingdom": Kingdom.ANIMALIA,
        "total_population": 23000,
        "image": None,
        "description": None,
        "endangered": False,
        "author": "11111111-1111-1111-1111-111111111111",
    }
    data.update(overrides)
    return SimpleNamespace(**data)


def _form(**overrides):
    raw = {"scientific_name": "Panthera leo", "kingdom": "Animalia"}
    raw.update(overrides)
    return validate_species(raw)


@pytest.fixture
def service():
    return SpeciesService()


class TestListSpecies:

    @pytest.mark.asyncio
    async def test_returns_rows_in_query_order(self, service, mock_db_session):
        result = MagicMock()
        result.scalars.return_value.all.return_value = [_row(id=3), _row(id=2), _row(id=1)]
        mock_db_session.execute.return_value = result

        species = await service.list_species(mock_db_session)

        assert [s.id for s in species] == [3, 2, 1]
        query = mock_db_session.execute.call_args.args[0]
        assert "ORDER BY species.id DESC" in str(query)

    @pytest.mark.asyncio
    async def test_empty_table(self, service, mock_db_session):
        result = MagicMock()
        result.scalars.return_value.all.return_value = []
        mock_db_session.execute.return_value = result

        assert await service.list_species(mock_db_session) == []

    @pytest.mark.asyncio
    async def test_null_endangered_reads_as_false(self, service, mock_db_session):
        result = MagicMock()
        result.scalars.return_value.all.return_value = [_row(endangered=None)]
        mock_db_session.execute.return_value = result

        species = await service.list_species(mock_db_session)

        assert species[0].endangered is False

    @pytest.mark.asyncio
    async def test_driver_failure_is_a_database_error(self, service, mock_db_session):
        mock_db_session.execute.side_effect = OperationalError("SELECT", {}, Exception("down"))

        with pytest.raises(DatabaseError) as exc_info:
            await service.list_species(mock_db_session)
        assert exc_info.value.message == "Could not load species. Please try again."


class TestGetSpecies:

    @pytest.mark.asyncio
    async def test_found(self, service, mock_db_session):
        mock_db_session.execute.return_value.scalar_one_or_none = MagicMock(return_value=_row(id=5))

        species = await service.get_species(mock_db_session, 5)

        assert species.id == 5
        assert species.scientific_name == "Panthera leo"

    @pytest.mark.asyncio
    async def test_missing(self, service, mock_db_session):
        mock_db_session.execute.return_value.scalar_one_or_none = MagicMock(return_value=None)

        with pytest.raises(NotFoundError):
            await service.get_species(mock_db_session, 404)


class TestCreateSpecies:

    @pytest.mark.asyncio
    async def test_adds_row_owned_by_author(self, service, mock_db_session, author_id):
        added = []

        def _add(obj):
            added.append(obj)

        async def _flush():
            added[0].id = 9

        mock_db_session.add.side_effect = _add
        mock_db_session.flush.side_effect = _flush

        created = await service.create_species(
            mock_db_session, author=author_id, form=_form(common_name="Lion")
        )

        assert isinstance(added[0], Species)
        assert added[0].author == author_id
        assert created.id == 9
        assert created.common_name == "Lion"
        assert created.endangered is False

    @pytest.mark.asyncio
    async def test_flush_failure(self, service, mock_db_session, author_id):
        mock_db_session.flush.side_effect = OperationalError("INSERT", {}, Exception("down"))

        with pytest.raises(DatabaseError):
            await service.create_species(mock_db_session, author=author_id, form=_form())


class TestUpdateSpecies:

    @pytest.mark.asyncio
    async def test_writes_exactly_the_form_fields(self, service, mock_db_session):
        mock_db_session.execute.return_value.scalar_one_or_none = MagicMock(
            return_value=_row(endangered=True)
        )

        updated = await service.update_species(mock_db_session, 1, _form(endangered="true"))

        assert updated.endangered is True
        statement = mock_db_session.execute.call_args.args[0]
        compiled = statement.compile()
        assert set(compiled.params) >= {
            "scientific_name", "common_name", "kingdom", "total_population",
            "image", "description", "endangered",
        }
        assert compiled.params["endangered"] is True
        assert compiled.params["common_name"] is None

    @pytest.mark.asyncio
    async def test_no_matching_row(self, service, mock_db_session):
        mock_db_session.execute.return_value.scalar_one_or_none = MagicMock(return_value=None)

        with pytest.raises(NotFoundError):
            await service.update_species(mock_db_session, 1, _form())

    @pytest.mark.asyncio
    async def test_driver_failure(self, service, mock_db_session):
        mock_db_session.execute.side_effect = OperationalError("UPDATE", {}, Exception("down"))

        with pytest.raises(DatabaseError) as exc_info:
            await service.update_species(mock_db_session, 1, _form())
        assert exc_info.value.message == "Could not save your changes. Please try again."


class TestDeleteSpecies:

    @pytest.mark.asyncio
    async def test_deletes_by_id(self, service, mock_db_session):
        mock_db_session.execute.return_value = MagicMock(rowcount=1)

        await service.delete_species(mock_db_session, 1)

        statement = mock_db_session.execute.call_args.args[0]
        assert str(statement).startswith("DELETE FROM species")

    @pytest.mark.asyncio
    async def test_no_matching_row(self, service, mock_db_session):
        mock_db_session.execute.return_value = MagicMock(rowcount=0)

        with pytest.raises(NotFoundError):
            await service.delete_species(mock_db_session, 1)
