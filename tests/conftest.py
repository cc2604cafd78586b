from ecostore.testing.fixtures import json_economy  # noqa: F401
