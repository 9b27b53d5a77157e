"""API Routes Module."""

from fastapi import APIRouter

from sensorhub.api import auth, devices, sensor_data

router = APIRouter()

router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
router.include_router(devices.router, prefix="/devices", tags=["Devices"])
router.include_router(sensor_data.router, tags=["Sensor Data"])
