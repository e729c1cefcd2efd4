"""
Posture Checks Tool
CRUD for peer posture checks (client version, OS version, geolocation,
network range and running-process requirements).
"""

import logging
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from ..client import NetbirdClient
from .base import NetbirdEntity, NullAsDefaultModel, decode, decode_list, deleted, parse_input, request_body

logger = logging.getLogger(__name__)


class VersionCheck(NullAsDefaultModel):
    min_version: Optional[str] = None


class OSVersions(NullAsDefaultModel):
    min_version: Optional[str] = None
    min_kernel_version: Optional[str] = None


class OSVersionCheck(NullAsDefaultModel):
    android: Optional[OSVersions] = None
    ios: Optional[OSVersions] = None
    darwin: Optional[OSVersions] = None
    linux: Optional[OSVersions] = None
    windows: Optional[OSVersions] = None


class Location(NullAsDefaultModel):
    country_code: str
    city_name: str = ""


class GeoLocationCheck(NullAsDefaultModel):
    locations: List[Location] = Field(default_factory=list)
    action: str = Field(..., description="allow or deny")


class NetworkRangeCheck(NullAsDefaultModel):
    ranges: List[str] = Field(default_factory=list)
    action: str = Field(..., description="allow or deny")


class ProcessPath(NullAsDefaultModel):
    linux_path: Optional[str] = None
    mac_path: Optional[str] = None
    windows_path: Optional[str] = None


class ProcessCheck(NullAsDefaultModel):
    processes: List[ProcessPath] = Field(default_factory=list)


class CheckConfig(NullAsDefaultModel):
    model_config = ConfigDict(extra="allow")

    nb_version_check: Optional[VersionCheck] = None
    os_version_check: Optional[OSVersionCheck] = None
    geo_location_check: Optional[GeoLocationCheck] = None
    peer_network_range_check: Optional[NetworkRangeCheck] = None
    process_check: Optional[ProcessCheck] = None


class PostureCheck(NetbirdEntity):
    id: str = ""
    name: str = ""
    description: str = ""
    checks: CheckConfig = Field(default_factory=CheckConfig)


class GetPostureCheckInput(BaseModel):
    posture_check_id: str = Field(..., description="The ID of the posture check")


class CreatePostureCheckInput(BaseModel):
    name: str = Field(..., description="Posture check name")
    description: Optional[str] = Field(None, description="Posture check description")
    checks: CheckConfig = Field(..., description="Check configuration")


class UpdatePostureCheckInput(BaseModel):
    posture_check_id: str = Field(..., description="The ID of the posture check to update")
    name: Optional[str] = Field(None, description="Posture check name")
    description: Optional[str] = Field(None, description="Posture check description")
    checks: Optional[CheckConfig] = Field(None, description="Check configuration")


class PostureChecksTool:
    """CRUD operations on /posture-checks."""

    def list(self, client: NetbirdClient) -> List[Dict[str, Any]]:
        return decode_list(PostureCheck, client.get("/posture-checks"))

    def get(self, client: NetbirdClient, input_data: Union[Dict[str, Any], GetPostureCheckInput]) -> Dict[str, Any]:
        args = parse_input(GetPostureCheckInput, input_data)
        return decode(PostureCheck, client.get(f"/posture-checks/{args.posture_check_id}"))

    def create(self, client: NetbirdClient, input_data: Union[Dict[str, Any], CreatePostureCheckInput]) -> Dict[str, Any]:
        args = parse_input(CreatePostureCheckInput, input_data)
        logger.info(f"Creating posture check '{args.name}'")
        return decode(PostureCheck, client.post("/posture-checks", request_body(args)))

    def update(self, client: NetbirdClient, input_data: Union[Dict[str, Any], UpdatePostureCheckInput]) -> Dict[str, Any]:
        args = parse_input(UpdatePostureCheckInput, input_data)
        logger.info(f"Updating posture check '{args.posture_check_id}'")
        body = request_body(args, exclude={"posture_check_id"})
        return decode(PostureCheck, client.put(f"/posture-checks/{args.posture_check_id}", body))

    def delete(self, client: NetbirdClient, input_data: Union[Dict[str, Any], GetPostureCheckInput]) -> Dict[str, str]:
        args = parse_input(GetPostureCheckInput, input_data)
        logger.info(f"Deleting posture check '{args.posture_check_id}'")
        client.delete(f"/posture-checks/{args.posture_check_id}")
        return deleted(posture_check_id=args.posture_check_id)


# Create singleton instance for FastMCP
posture_checks_tool = PostureChecksTool()
