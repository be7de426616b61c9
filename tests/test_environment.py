from postman_builder.generator.environment import build_environment


class TestBuildEnvironment:
    def test_values_in_insertion_order(self):
        env = build_environment("Shop", {"host": "http://localhost", "accessKey": "k", "tenant": "t1"})
        assert env == {
            "name": "Shop",
            "values": [
                {"key": "host", "value": "http://localhost", "enabled": True},
                {"key": "accessKey", "value": "k", "enabled": True},
                {"key": "tenant", "value": "t1", "enabled": True},
            ],
        }

    def test_empty(self):
        assert build_environment("Shop", {}) == {"name": "Shop", "values": []}
