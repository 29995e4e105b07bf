import re

import pulumi
import pytest


def camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def prop(inputs: dict, name: str):
    """Look up an input by its Python name, accepting the wire (camelCase) spelling."""
    if camel(name) in inputs:
        return inputs[camel(name)]
    return inputs.get(name)


class RecordingMocks(pulumi.runtime.Mocks):
    """Echoes inputs back as state and records every registered resource."""

    def __init__(self) -> None:
        self.resources: list[pulumi.runtime.MockResourceArgs] = []

    def new_resource(self, args: pulumi.runtime.MockResourceArgs) -> tuple[str, dict]:
        state = dict(args.inputs)
        host = len(self.resources) + 2

        if args.typ == "docker:index/remoteImage:RemoteImage":
            state["imageId"] = f"sha256:{args.inputs['name']}"
        elif args.typ == "docker:index/container:Container":
            networks = prop(args.inputs, "networks_advanced") or [{}]
            state["networkDatas"] = [{"ipAddress": f"172.18.0.{host}", "networkName": networks[0].get("name")}]
        elif args.typ == "aws:ec2/instance:Instance":
            state["privateIp"] = f"10.0.0.{host}"

        self.resources.append(args)
        return f"{args.name}_id", state

    def call(self, args: pulumi.runtime.MockCallArgs) -> dict:
        return {}

    def declared(self, typ: str | None = None) -> list[pulumi.runtime.MockResourceArgs]:
        return [
            resource
            for resource in self.resources
            if not resource.typ.startswith("pulumi:providers:") and (typ is None or resource.typ == typ)
        ]

    def index(self, name: str) -> int:
        """Registration position of a declared resource."""
        return self.declared().index(self.named(name))

    def named(self, name: str) -> pulumi.runtime.MockResourceArgs:
        (resource,) = [resource for resource in self.declared() if resource.name == name]
        return resource


@pytest.fixture
def mocks() -> RecordingMocks:
    mocks = RecordingMocks()
    pulumi.runtime.set_mocks(mocks, preview=False)
    return mocks


class DeclarationFailed(Exception):
    pass


@pytest.fixture
def fail_declaration(monkeypatch):
    """Make one resource constructor raise for a given resource name.

    Returns the list of names the patched constructor was asked to declare.
    """
    attempted: list[str] = []

    def patch(owner, attr: str, failing_name: str) -> list[str]:
        original = getattr(owner, attr)

        def declare(resource_name, *args, **kwargs):
            attempted.append(resource_name)
            if resource_name == failing_name:
                raise DeclarationFailed(resource_name)
            return original(resource_name, *args, **kwargs)

        monkeypatch.setattr(owner, attr, declare)
        return attempted

    return patch


IPV4 = re.compile(r"^\d{1,3}(\.\d{1,3}){3}$")
