from types import MappingProxyType

from dabradio.service import Service
from dabradio.servicecomponent import ServiceComponent


class _Component(ServiceComponent):
    def component_msc_data_input(self, data):
        pass


class _NamedService(Service):
    programme_type_names = MappingProxyType({1: ("News", "News", "News")})


def test_defaults():
    srv = Service()
    assert srv.service_id == 0xFFFFFFFF
    assert srv.ca_id == 0
    assert srv.is_ca_applied is False
    assert srv.programme_type_code == 0
    assert srv.programme_type_full_name == "No program type"
    assert srv.programme_type_16char_name == "None"
    assert srv.programme_type_8char_name == "None"
    assert srv.components == ()
    assert srv.ensemble_frequency == 0


def test_ca_id_sets_ca_applied():
    srv = Service()
    srv.ca_id = 5
    assert srv.ca_id == 5
    assert srv.is_ca_applied is True
    srv.ca_id = 0
    assert srv.is_ca_applied is False


def test_programme_type_code_out_of_range_is_ignored():
    srv = Service()
    srv.programme_type_code = 32
    assert srv.programme_type_code == 0


def test_programme_type_code_in_range_is_kept():
    srv = Service()
    srv.programme_type_code = 31
    assert srv.programme_type_code == 31
    assert srv.programme_type_full_name == "No program type"


def test_programme_type_names_come_from_table():
    plain = Service()
    plain.programme_type_code = 1
    named = _NamedService()
    named.programme_type_code = 1
    assert plain.programme_type_code == named.programme_type_code == 1
    assert plain.programme_type_full_name == "No program type"
    assert named.programme_type_full_name == "News"
    assert named.programme_type_16char_name == "News"
    assert named.programme_type_8char_name == "News"


def test_labels_are_set_only_once():
    srv = Service()
    srv.set_label("Radio One")
    srv.set_label("Radio Two")
    srv.set_short_label("One")
    srv.set_short_label("Two")
    assert srv.label == "Radio One"
    assert srv.short_label == "One"


def test_components_keep_insertion_order():
    srv = Service()
    first, second = _Component(), _Component()
    first.subchannel_id = 4
    second.subchannel_id = 9
    srv.add_service_component(first)
    srv.add_service_component(second)
    assert [c.subchannel_id for c in srv.components] == [4, 9]
    assert srv.components[0] is first