import pulumi
import pulumi_aws as aws

from infra.aws_network import Network
from infra.config import AwsSettings
from infra.constants import ANY_IPV4, MINIO_CONSOLE_PORT, Workload

NGINX_USER_DATA = """#!/bin/bash
yum update -y
amazon-linux-extras install nginx1 -y
systemctl enable nginx
systemctl start nginx
"""

K3S_USER_DATA = """#!/bin/bash
curl -sfL https://get.k3s.io | sh -
"""

MINIO_USER_DATA = """#!/bin/bash
yum update -y
curl -O https://dl.min.io/server/minio/release/linux-amd64/minio
chmod +x minio
mv minio /usr/local/bin/
mkdir -p /data/minio
export MINIO_ACCESS_KEY={access_key}
export MINIO_SECRET_KEY={secret_key}
nohup minio server /data/minio --console-address ':{console_port}' &
"""

POSTGRES_USER_DATA = """#!/bin/bash
yum update -y
yum install postgresql-server -y
postgresql-setup initdb
systemctl enable postgresql
systemctl start postgresql
"""

# Workload -> (resource name, Name tag)
INSTANCES = {
    Workload.NGINX_LB: ("nginxLb", "Nginx-Load-Balancer"),
    Workload.K3S_MASTER: ("k3sMaster", "K3s-Master"),
    Workload.MINIO: ("minio", "MinIO-Object-Storage"),
    Workload.POSTGRES: ("postgresDb", "PostgreSQL-Database"),
}


def user_data(workload: Workload, settings: AwsSettings) -> str:
    if workload is Workload.MINIO:
        return MINIO_USER_DATA.format(
            access_key=settings.minio_access_key,
            secret_key=settings.minio_secret_key,
            console_port=MINIO_CONSOLE_PORT,
        )
    return {
        Workload.NGINX_LB: NGINX_USER_DATA,
        Workload.K3S_MASTER: K3S_USER_DATA,
        Workload.POSTGRES: POSTGRES_USER_DATA,
    }[workload]


def make_security_group(workload: Workload, network: Network, settings: AwsSettings) -> aws.ec2.SecurityGroup:
    resource_name, tag = INSTANCES[workload]
    # Only the load balancer is reachable from outside the VPC
    source = ANY_IPV4 if workload is Workload.NGINX_LB else str(settings.vpc_cidr)

    return aws.ec2.SecurityGroup(
        f"{resource_name}Sg",
        vpc_id=network.vpc.id,
        description=f"{tag} ingress",
        ingress=[
            aws.ec2.SecurityGroupIngressArgs(
                protocol="tcp",
                from_port=port,
                to_port=port,
                cidr_blocks=[source],
            )
            for port in workload.ports
        ],
        egress=[
            aws.ec2.SecurityGroupEgressArgs(
                protocol="-1",  # all protocols
                from_port=0,
                to_port=0,
                cidr_blocks=[ANY_IPV4],
            )
        ],
        tags={"Name": f"{tag}-SG"},
    )


def make_compute(network: Network, settings: AwsSettings) -> dict[str, pulumi.Output]:
    outputs = {"vpc_id": network.vpc.id}

    for workload, (resource_name, tag) in INSTANCES.items():
        subnet_name = settings.subnet_for(workload)
        security_group = make_security_group(workload, network, settings)

        pulumi.log.info(f"Declaring instance {resource_name} on {subnet_name}")
        instance = aws.ec2.Instance(
            resource_name,
            ami=settings.ami,
            instance_type=settings.instance_type,
            subnet_id=network.subnets[subnet_name].id,
            vpc_security_group_ids=[security_group.id],
            # Only the load balancer is reached through the internet gateway
            associate_public_ip_address=True if workload is Workload.NGINX_LB else None,
            user_data=user_data(workload, settings),
            tags={"Name": tag},
        )
        outputs[f"{workload.export_key}_private_ip"] = instance.private_ip

    for key, value in outputs.items():
        pulumi.export(key, value)

    return outputs
