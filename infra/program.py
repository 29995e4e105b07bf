import pulumi

from infra.aws_compute import make_compute
from infra.aws_network import make_network
from infra.config import StackSettings
from infra.docker_stack import make_docker_stack


def make_aws_stack(settings: StackSettings) -> dict[str, pulumi.Output]:
    network = make_network(settings.aws)
    return make_compute(network, settings.aws)


def _make_docker(settings: StackSettings) -> dict[str, pulumi.Output]:
    return make_docker_stack(settings.docker)


TARGETS = {
    "docker": _make_docker,
    "aws": make_aws_stack,
}


def provision(settings: StackSettings) -> dict[str, pulumi.Output]:
    pulumi.log.info(f"Provisioning {settings.target} target")
    return TARGETS[settings.target](settings)
