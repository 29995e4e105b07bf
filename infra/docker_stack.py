import pulumi
import pulumi_docker as docker

from infra.config import DockerSettings
from infra.constants import MINIO_CONSOLE_PORT, Workload


def _ports(workload: Workload) -> list[docker.ContainerPortArgs]:
    return [docker.ContainerPortArgs(internal=port, external=port) for port in workload.ports]


def _container(
    workload: Workload,
    network: docker.Network,
    settings: DockerSettings,
    **kwargs,
) -> docker.Container:
    image = docker.RemoteImage(f"{workload.value}-image", name=settings.image_for(workload))

    pulumi.log.info(f"Declaring container {workload.value} ({settings.image_for(workload)})")
    return docker.Container(
        workload.value,
        image=image.image_id,
        ports=_ports(workload),
        networks_advanced=[docker.ContainerNetworksAdvancedArgs(name=network.name)],
        restart=settings.restart_policy,
        **kwargs,
    )


def container_ip(container: docker.Container) -> pulumi.Output[str]:
    # Containers are attached to the custom network only
    return container.network_datas.apply(lambda datas: datas[0].ip_address)


def make_docker_stack(settings: DockerSettings) -> dict[str, pulumi.Output]:
    network = docker.Network(
        settings.network_name,
        name=settings.network_name,
        driver=settings.network_driver,
    )
    pulumi.log.debug(f"Declared {settings.network_driver} network {settings.network_name}")

    # 1. Nginx load balancer
    nginx = _container(Workload.NGINX_LB, network, settings)

    # 2. K3s master, needs privileged mode to run its own containerd
    k3s_master = _container(
        Workload.K3S_MASTER,
        network,
        settings,
        command=["server", "--no-deploy", "traefik"],
        envs=[f"K3S_KUBECONFIG_MODE={settings.k3s_kubeconfig_mode}"],
        privileged=True,
    )

    # 3. MinIO object storage
    minio = _container(
        Workload.MINIO,
        network,
        settings,
        command=["server", "/data", "--console-address", f":{MINIO_CONSOLE_PORT}"],
        envs=[
            f"MINIO_ACCESS_KEY={settings.minio_access_key}",
            f"MINIO_SECRET_KEY={settings.minio_secret_key}",
        ],
    )

    # 4. PostgreSQL database, data on an anonymous volume
    postgres = _container(
        Workload.POSTGRES,
        network,
        settings,
        envs=[
            f"POSTGRES_USER={settings.postgres_user}",
            f"POSTGRES_PASSWORD={settings.postgres_password}",
        ],
        volumes=[docker.ContainerVolumeArgs(container_path=settings.postgres_data_path)],
    )

    outputs = {}
    for workload, container in (
        (Workload.NGINX_LB, nginx),
        (Workload.K3S_MASTER, k3s_master),
        (Workload.MINIO, minio),
        (Workload.POSTGRES, postgres),
    ):
        outputs[f"{workload.export_key}_ip"] = container_ip(container)

    for key, value in outputs.items():
        pulumi.export(key, value)

    return outputs
