"""A Docker / AWS Python Pulumi program"""

import pulumi

from infra.config import load_settings
from infra.program import provision

# Select the target and override defaults from Pulumi config
config = pulumi.Config()
settings = load_settings(config.get_object("settings"))

provision(settings)
