from cadastro.common.settings import Settings
from cadastro.forms.investor import SPOUSE_FIELDS, TABS, build_investor_form, investor_fields


def test_investor_fields_build_with_name_rules():
    configs = {config.name: config for config in investor_fields()}

    assert configs["nome_completo"].rules.name
    assert configs["nome_completo"].rules.required
    assert configs["conjuge_nome_mae"].rules.name
    assert configs["conjuge_nome_mae"].section == "conjuge"
    assert set(SPOUSE_FIELDS) <= set(configs)


def test_offline_form_has_every_tab_and_no_collaborators(today):
    form = build_investor_form(Settings(), today=today, offline=True)

    assert form.active_tab == TABS[0]
    assert form.address_lookup is None
    assert form.submitter is None
    assert form.debouncer is None
    assert {state.tab for state in form.fields.values()} == set(range(len(TABS)))
