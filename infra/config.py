"""Stack settings read from the ``settings`` object in Pulumi config.

Every field defaults to the value the stacks were first written with, so a
stack with no ``settings`` key provisions exactly that layout. The one
exception is Postgres, pinned to 17: from 18 on the image refuses a volume at
``/var/lib/postgresql/data``.
"""

from ipaddress import IPv4Network
from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator

from infra.constants import RESTART_ALWAYS, Workload


class DockerSettings(BaseModel):
    network_name: str = "my_network"
    network_driver: str = "bridge"
    restart_policy: str = RESTART_ALWAYS

    nginx_image: str = "nginx:latest"
    k3s_image: str = "rancher/k3s:v1.22.4-k3s1"
    minio_image: str = "minio/minio:latest"
    postgres_image: str = "postgres:17"

    k3s_kubeconfig_mode: str = "0644"
    minio_access_key: str = "minioadmin"
    minio_secret_key: str = "minioadmin"
    postgres_user: str = "postgres"
    postgres_password: str = "password"
    postgres_data_path: str = "/var/lib/postgresql/data"

    def image_for(self, workload: Workload) -> str:
        return {
            Workload.NGINX_LB: self.nginx_image,
            Workload.K3S_MASTER: self.k3s_image,
            Workload.MINIO: self.minio_image,
            Workload.POSTGRES: self.postgres_image,
        }[workload]


class SubnetSettings(BaseModel):
    name: str
    cidr_block: IPv4Network
    availability_zone: str
    tag: str


def _default_subnets() -> list[SubnetSettings]:
    return [
        SubnetSettings(name="subnet1", cidr_block="10.0.1.0/24", availability_zone="us-east-1a", tag="Main-Subnet-1"),
        SubnetSettings(name="subnet2", cidr_block="10.0.2.0/24", availability_zone="us-east-1b", tag="Main-Subnet-2"),
    ]


def _default_placement() -> dict[Workload, str]:
    return {
        Workload.NGINX_LB: "subnet1",
        Workload.K3S_MASTER: "subnet2",
        Workload.MINIO: "subnet1",
        Workload.POSTGRES: "subnet1",
    }


class AwsSettings(BaseModel):
    vpc_cidr: IPv4Network = IPv4Network("10.0.0.0/16")
    vpc_tag: str = "Main-VPC"
    subnets: list[SubnetSettings] = Field(default_factory=_default_subnets)
    # Workload -> subnet name
    placement: dict[Workload, str] = Field(default_factory=_default_placement)

    ami: str = "ami-0c55b159cbfafe1f0"
    instance_type: str = "t2.micro"

    minio_access_key: str = "minioadmin"
    minio_secret_key: str = "minioadmin"

    @model_validator(mode="after")
    def check_subnets(self) -> "AwsSettings":
        names = [subnet.name for subnet in self.subnets]
        if len(names) != len(set(names)):
            raise ValueError(f"subnet names must be unique, got {names}")

        for subnet in self.subnets:
            if not subnet.cidr_block.subnet_of(self.vpc_cidr):
                raise ValueError(f"subnet {subnet.name} ({subnet.cidr_block}) is outside the VPC ({self.vpc_cidr})")

        for i, first in enumerate(self.subnets):
            for second in self.subnets[i + 1 :]:
                if first.cidr_block.overlaps(second.cidr_block):
                    raise ValueError(f"subnets {first.name} and {second.name} overlap")

        return self

    @field_validator("placement", mode="before")
    @classmethod
    def merge_placement(cls, value: dict) -> dict[Workload, str]:
        if not isinstance(value, dict):
            return value
        # Overrides move single workloads, the rest keep their default subnet
        return {**_default_placement(), **{Workload(key): subnet for key, subnet in value.items()}}

    @model_validator(mode="after")
    def check_placement(self) -> "AwsSettings":
        declared = {subnet.name for subnet in self.subnets}
        for workload, subnet_name in self.placement.items():
            if subnet_name not in declared:
                raise ValueError(f"{workload.value} is placed on undeclared subnet {subnet_name!r}")

        return self

    def subnet_for(self, workload: Workload) -> str:
        return self.placement[workload]


class StackSettings(BaseModel):
    target: Literal["docker", "aws"] = "docker"
    docker: DockerSettings = Field(default_factory=DockerSettings)
    aws: AwsSettings = Field(default_factory=AwsSettings)


def load_settings(raw: dict | None) -> StackSettings:
    return StackSettings.model_validate(raw or {})
