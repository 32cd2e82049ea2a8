import pytest

from persondirectory.person import Person

@pytest.fixture(name="person")
def person_fixture():
    return Person("tUser", {"firstname": "Tester", "mail": ["t@example.com", "tu@example.com"]})

class TestPerson:
    """Test the Person value bag."""

    def test_attribute_names(self, person):
        assert person.attribute_names() == {"firstname", "mail"}

    def test_single_value(self, person):
        assert person.attribute_value("firstname") == "Tester"
        assert person.attribute_values("firstname") == ("Tester",)

    def test_multi_value(self, person):
        assert person.attribute_value("mail") == "t@example.com"
        assert person.attribute_values("mail") == ("t@example.com", "tu@example.com")

    def test_missing_attribute(self, person):
        assert person.attribute_value("lastname") is None
        assert person.attribute_values("lastname") == ()
        assert "lastname" not in person

    def test_names_are_case_sensitive(self, person):
        assert person.attribute_value("FirstName") is None

    def test_empty_values(self):
        person = Person("tUser", {"description": []})
        assert "description" in person
        assert person.attribute_value("description") is None

    def test_read_only(self, person):
        with pytest.raises(TypeError):
            person._attributes["lastname"] = ("User",)

    def test_to_dict(self, person):
        assert person.to_dict() == {"firstname": ["Tester"], "mail": ["t@example.com", "tu@example.com"]}

    def test_equality(self, person):
        assert person == Person("tUser", {"mail": ("t@example.com", "tu@example.com"), "firstname": ["Tester"]})
        assert person != Person("other", person.to_dict())
