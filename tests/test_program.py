import pulumi

from infra.config import StackSettings
from infra.program import provision


def run(settings: StackSettings) -> dict:
    outputs = {}

    @pulumi.runtime.test
    def declare():
        outputs.update(provision(settings))

    declare()
    return outputs


def test_docker_target(mocks):
    outputs = run(StackSettings(target="docker"))

    assert set(outputs) == {"nginx_lb_ip", "k3s_master_ip", "minio_ip", "postgres_ip"}
    assert {resource.typ.split(":")[0] for resource in mocks.declared()} == {"docker"}


def test_aws_target(mocks):
    outputs = run(StackSettings(target="aws"))

    assert "vpc_id" in outputs
    assert "postgres_private_ip" in outputs
    assert {resource.typ.split(":")[0] for resource in mocks.declared()} == {"aws"}
