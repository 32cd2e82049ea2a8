import json

import pytest
import yaml

from persondirectory.main import main

@pytest.fixture(name="config_file")
def config_file_fixture(tmp_path, ldap_entries, basic_ldap_params):
    entries_file = tmp_path / "ldap_entries.json"
    entries_file.write_text(json.dumps({
        "entries": [{"dn": dn, "attributes": attrs} for dn, attrs in ldap_entries.items()]
    }), encoding="utf-8")
    config = {
        "ldap": {"bind_dn": basic_ldap_params["user"], "bind_pw": basic_ldap_params["password"]},
        "provider": {"base_dn": basic_ldap_params["base_dn"],
                     "attributes": ["firstname", "lastname"]},
        "mockup": {"enabled": True, "file": str(entries_file)},
        "prometheus": {"enabled": True, "textfile": str(tmp_path / "persondirectory.prom")},
    }
    config_file = tmp_path / "persondirectory.yaml"
    config_file.write_text(yaml.safe_dump(config))
    return config_file

class TestMain:
    """Test the command line entry point."""

    def test_lookup(self, config_file, capsys):
        assert main(["--config", str(config_file), "tUser", "nobody"]) == 0
        lines = [json.loads(line) for line in capsys.readouterr().out.splitlines()]
        assert lines[0] == {"uid": "tUser", "attributes": {"firstname": ["Tester"], "lastname": ["User"]}}
        assert lines[1] == {"uid": "nobody", "found": False}

    def test_metrics_textfile(self, config_file, tmp_path):
        main(["--config", str(config_file), "tUser"])
        text = (tmp_path / "persondirectory.prom").read_text()
        assert 'outcome="found"' in text

    def test_lookup_error(self, config_file, capsys):
        config = yaml.safe_load(config_file.read_text())
        config["ldap"]["bind_pw"] = "wrong"
        config_file.write_text(yaml.safe_dump(config))
        assert main(["--config", str(config_file), "tUser"]) == 1
        assert capsys.readouterr().out == ""

    def test_missing_config(self, tmp_path):
        assert main(["--config", str(tmp_path / "missing.yaml"), "tUser"]) == 1

    def test_requires_identifier(self, config_file):
        with pytest.raises(SystemExit):
            main(["--config", str(config_file)])

    def test_invalid_yaml(self, tmp_path):
        config_file = tmp_path / "broken.yaml"
        config_file.write_text("provider: [base_dn: {\n")
        assert main(["--config", str(config_file), "tUser"]) == 1

    def test_config_not_a_mapping(self, tmp_path):
        config_file = tmp_path / "list.yaml"
        config_file.write_text("- provider\n- ldap\n")
        assert main(["--config", str(config_file), "tUser"]) == 1

    def test_empty_identifier(self, config_file, capsys):
        assert main(["--config", str(config_file), ""]) == 1
        assert capsys.readouterr().out == ""
