from dataclasses import dataclass

import pulumi
import pulumi_aws as aws

from infra.config import AwsSettings
from infra.constants import ANY_IPV4


@dataclass
class Network:
    vpc: aws.ec2.Vpc
    subnets: dict[str, aws.ec2.Subnet]
    internet_gateway: aws.ec2.InternetGateway
    route_table: aws.ec2.RouteTable


def make_network(settings: AwsSettings) -> Network:
    # Create VPC with DNS so instances get resolvable hostnames
    vpc = aws.ec2.Vpc(
        "mainVpc",
        cidr_block=str(settings.vpc_cidr),
        enable_dns_support=True,
        enable_dns_hostnames=True,
        tags={"Name": settings.vpc_tag},
    )

    subnets = {}
    for subnet in settings.subnets:
        subnets[subnet.name] = aws.ec2.Subnet(
            subnet.name,
            vpc_id=vpc.id,
            cidr_block=str(subnet.cidr_block),
            availability_zone=subnet.availability_zone,
            tags={"Name": subnet.tag},
        )
        pulumi.log.debug(f"Declared subnet {subnet.name} ({subnet.cidr_block}, {subnet.availability_zone})")

    # Create Internet Gateway attached to the VPC
    internet_gateway = aws.ec2.InternetGateway(
        "mainIgw",
        vpc_id=vpc.id,
        tags={"Name": "Main-InternetGateway"},
    )

    # Create Route Table with default route to the Internet Gateway
    route_table = aws.ec2.RouteTable(
        "mainRt",
        vpc_id=vpc.id,
        routes=[
            aws.ec2.RouteTableRouteArgs(
                cidr_block=ANY_IPV4,
                gateway_id=internet_gateway.id,
            )
        ],
        tags={"Name": "Main-Route-Table"},
    )

    for name, subnet in subnets.items():
        aws.ec2.RouteTableAssociation(
            f"{name}Assoc",
            subnet_id=subnet.id,
            route_table_id=route_table.id,
        )

    pulumi.log.info(f"Declared VPC {settings.vpc_cidr} with {len(subnets)} subnets")
    return Network(vpc=vpc, subnets=subnets, internet_gateway=internet_gateway, route_table=route_table)
