from cadastro.forms.debounce import Debouncer


class ManualScheduler:
    def __init__(self):
        self.pending = []

    def __call__(self, delay_seconds, callback):
        self.pending.append((delay_seconds, callback))

    def run_all(self):
        pending, self.pending = self.pending, []
        for _, callback in pending:
            callback()


def test_schedule_passes_key_and_delay():
    scheduler = ManualScheduler()
    seen = []
    debouncer = Debouncer(300, scheduler)

    debouncer.schedule("cpf", seen.append)

    assert scheduler.pending[0][0] == 0.3
    assert seen == []
    scheduler.run_all()
    assert seen == ["cpf"]


def test_callbacks_read_live_state():
    scheduler = ManualScheduler()
    state = {"cpf": "1"}
    seen = []
    debouncer = Debouncer(300, scheduler)

    debouncer.schedule("cpf", lambda key: seen.append(state[key]))
    state["cpf"] = "111.444.777-35"
    debouncer.schedule("cpf", lambda key: seen.append(state[key]))
    scheduler.run_all()

    assert seen == ["111.444.777-35", "111.444.777-35"]


def test_negative_delay_clamped():
    assert Debouncer(-5, ManualScheduler()).delay_seconds == 0
