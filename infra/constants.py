from enum import Enum

RESTART_ALWAYS = "always"
ANY_IPV4 = "0.0.0.0/0"

MINIO_CONSOLE_PORT = 9001


class Workload(Enum):
    NGINX_LB = "nginx_lb"
    K3S_MASTER = "k3s_master"
    MINIO = "minio"
    POSTGRES = "postgres_db"

    @property
    def export_key(self) -> str:
        return EXPORT_KEYS[self]

    @property
    def ports(self) -> tuple[int, ...]:
        return WORKLOAD_PORTS[self]


EXPORT_KEYS = {
    Workload.NGINX_LB: "nginx_lb",
    Workload.K3S_MASTER: "k3s_master",
    Workload.MINIO: "minio",
    Workload.POSTGRES: "postgres",
}

WORKLOAD_PORTS = {
    Workload.NGINX_LB: (80,),
    Workload.K3S_MASTER: (6443,),
    Workload.MINIO: (9000, MINIO_CONSOLE_PORT),
    Workload.POSTGRES: (5432,),
}
