"""Tests for device registry API endpoints."""

import uuid

import pytest
from httpx import AsyncClient

from sensorhub.models.device import Device


class TestDevicesAPI:
    """Tests for /devices."""

    @pytest.mark.asyncio
    async def test_create_device(self, client: AsyncClient, auth_headers):
        response = await client.post(
            "/api/v1/devices",
            json={"name": "Device 1", "location": "Building A"},
            headers=auth_headers,
        )

        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "Device 1"
        assert data["location"] == "Building A"
        assert data["api_key"]
        uuid.UUID(data["id"])

    @pytest.mark.asyncio
    async def test_create_device_requires_fields(self, client: AsyncClient, auth_headers):
        response = await client.post(
            "/api/v1/devices",
            json={"name": "Device 1"},
            headers=auth_headers,
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_create_device_not_authenticated(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/devices",
            json={"name": "Device 1", "location": "Building A"},
        )

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_list_devices_hides_api_key(
        self, client: AsyncClient, auth_headers, test_device: Device, other_device: Device
    ):
        response = await client.get("/api/v1/devices", headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert [d["name"] for d in data] == ["Greenhouse Sensor", "Warehouse Sensor"]
        assert all("api_key" not in d for d in data)

    @pytest.mark.asyncio
    async def test_get_device(self, client: AsyncClient, auth_headers, test_device: Device):
        response = await client.get(f"/api/v1/devices/{test_device.id}", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["id"] == str(test_device.id)

    @pytest.mark.asyncio
    async def test_get_device_not_found(self, client: AsyncClient, auth_headers):
        response = await client.get(f"/api/v1/devices/{uuid.uuid4()}", headers=auth_headers)

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_update_device(self, client: AsyncClient, auth_headers, test_device: Device):
        response = await client.put(
            f"/api/v1/devices/{test_device.id}",
            json={"name": "Renamed", "location": "Roof"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Renamed"
        assert data["location"] == "Roof"

    @pytest.mark.asyncio
    async def test_update_device_not_found(self, client: AsyncClient, auth_headers):
        response = await client.put(
            f"/api/v1/devices/{uuid.uuid4()}",
            json={"name": "Renamed", "location": "Roof"},
            headers=auth_headers,
        )

        assert response.status_code == 404
