"""
Biodex Backend - JSON API and Health Tests
===========================================

What:  Tests for /api/profiles, /api/species and /health.
How:   Same client fixture as the page tests; errors are asserted on the
       JSON envelope produced by the global exception handlers.
"""

import uuid
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from app.exceptions import NotFoundError
from app.schemas.profile import ProfileResponse
from app.services.profile_service import profile_service
from app.services.species_service import species_service


class TestAuthentication:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["/api/species", "/api/profiles", "/api/species/1"])
    async def test_signed_out_gets_401(self, client_for, path):
        client = await client_for(None)
        response = await client.get(path)

        assert response.status_code == 401
        assert response.headers["www-authenticate"] == "Bearer"
        body = response.json()
        assert body["error"] == "authentication_required"
        assert "request_id" in body


class TestProfilesApi:

    @pytest.mark.asyncio
    async def test_list(self, client_for, author_id):
        profiles = [ProfileResponse(id=author_id, display_name="Ada", email="ada@example.org")]
        client = await client_for(author_id)
        with patch.object(profile_service, "list_profiles", AsyncMock(return_value=profiles)):
            response = await client.get("/api/profiles")

        assert response.status_code == 200
        assert response.headers["x-total-count"] == "1"
        assert response.json()["profiles"][0]["display_name"] == "Ada"


class TestSpeciesApi:

    @pytest.mark.asyncio
    async def test_list(self, client_for, author_id, make_species):
        client = await client_for(author_id)
        species = [make_species(id=2), make_species(id=1)]
        with patch.object(species_service, "list_species", AsyncMock(return_value=species)):
            response = await client.get("/api/species")

        assert response.status_code == 200
        assert response.headers["x-total-count"] == "2"
        body = response.json()
        assert [s["id"] for s in body["species"]] == [2, 1]
        assert body["species"][0]["kingdom"] == "Animalia"

    @pytest.mark.asyncio
    async def test_get_missing(self, client_for, author_id):
        client = await client_for(author_id)
        missing = NotFoundError(resource="species", resource_id="42")
        with patch.object(species_service, "get_species", AsyncMock(side_effect=missing)):
            response = await client.get("/api/species/42")

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    @pytest.mark.asyncio
    async def test_create(self, client_for, author_id, make_species):
        client = await client_for(author_id)
        created = make_species(id=8, scientific_name="Quercus robur", kingdom="Plantae")
        with patch.object(species_service, "create_species", AsyncMock(return_value=created)) as create:
            response = await client.post(
                "/api/species",
                json={"scientific_name": "Quercus robur", "kingdom": "Plantae", "common_name": ""},
            )

        assert response.status_code == 201
        body = response.json()
        assert body["species"]["id"] == 8
        assert body["notification"]["title"] == "New species created!"
        form = create.call_args.kwargs["form"]
        assert form.common_name is None
        assert form.endangered is False

    @pytest.mark.asyncio
    async def test_create_invalid(self, client_for, author_id):
        client = await client_for(author_id)
        with patch.object(species_service, "create_species", AsyncMock()) as create:
            response = await client.post(
                "/api/species", json={"scientific_name": "Quercus robur", "kingdom": "Trees"}
            )

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "validation_error"
        assert "kingdom" in body["details"]["errors"]
        create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_patch_merges_with_stored_values(self, client_for, author_id, lion, make_species):
        client = await client_for(author_id)
        with patch.object(species_service, "get_species", AsyncMock(return_value=lion)), \
                patch.object(species_service, "update_species",
                             AsyncMock(return_value=make_species(endangered=True))) as update:
            response = await client.patch("/api/species/1", json={"endangered": True})

        assert response.status_code == 200
        assert response.json()["notification"]["description"] == "Saved your changes to Panthera leo"
        form = update.call_args.args[2]
        assert form.endangered is True
        assert form.scientific_name == "Panthera leo"
        assert form.total_population == 23000

    @pytest.mark.asyncio
    async def test_patch_by_other_user_is_forbidden(self, client_for, other_user_id, lion):
        client = await client_for(other_user_id)
        with patch.object(species_service, "get_species", AsyncMock(return_value=lion)), \
                patch.object(species_service, "update_species", AsyncMock()) as update:
            response = await client.patch("/api/species/1", json={"endangered": True})

        assert response.status_code == 403
        assert response.json()["error"] == "permission_denied"
        update.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_delete(self, client_for, author_id, lion):
        client = await client_for(author_id)
        with patch.object(species_service, "get_species", AsyncMock(return_value=lion)), \
                patch.object(species_service, "delete_species", AsyncMock()) as delete:
            response = await client.delete("/api/species/1")

        assert response.status_code == 200
        body = response.json()
        assert body["species"] is None
        assert body["notification"]["title"] == "Species Deleted!"
        delete.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_delete_by_other_user_is_forbidden(self, client_for, lion):
        client = await client_for(uuid.uuid4())
        with patch.object(species_service, "get_species", AsyncMock(return_value=lion)), \
                patch.object(species_service, "delete_species", AsyncMock()) as delete:
            response = await client.delete("/api/species/1")

        assert response.status_code == 403
        delete.assert_not_awaited()


def _engine(conn_error=None):
    """Mock AsyncEngine whose connect() context manager yields a mock connection."""
    conn = AsyncMock()
    if conn_error is not None:
        conn.execute.side_effect = conn_error
    cm = MagicMock()
    cm.__aenter__ = AsyncMock(return_value=conn)
    cm.__aexit__ = AsyncMock(return_value=False)
    engine = MagicMock()
    engine.connect.return_value = cm
    return engine


class TestHealth:

    @pytest.mark.asyncio
    async def test_healthy(self, client_for):
        client = await client_for(None)
        with patch("app.routes.health.engine", _engine()):
            response = await client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"

    @pytest.mark.asyncio
    async def test_database_down(self, client_for):
        client = await client_for(None)
        with patch("app.routes.health.engine", _engine(ConnectionRefusedError("down"))):
            response = await client.get("/health")

        assert response.status_code == 503
        assert response.json()["status"] == "unhealthy"
