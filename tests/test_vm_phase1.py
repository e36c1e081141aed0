import pytest

from ossim.vm_phase1 import Phase1Machine, load_cards, main


def deck(program, *data):
    return ["$AMJ000100030001", program, "$DTA", *data, "$END0001"]


def test_read_and_print_roundtrip():
    machine = Phase1Machine()
    output = machine.run(deck("GD10PD10H", "HELLO WORLD"))
    assert output == "HELLO WORLD\n\n\n"


def test_program_card_layout_in_memory():
    machine = Phase1Machine()
    machine.run(deck("GD10PD10H", "HELLO WORLD"))
    words = ["".join(w) for w in machine.memory]
    assert words[0] == "GD10"
    assert words[1] == "PD10"
    assert words[2] == "H\0\0\0"
    assert words[10] == "HELL"
    assert words[12] == "RLD\0"


def test_load_and_store_register():
    machine = Phase1Machine()
    output = machine.run(deck("GD20LR20SR30PD30H", "ABCD"))
    assert output == "ABCD\n\n\n"
    assert machine.register == list("ABCD")


def test_compare_true_branches_over_print():
    machine = Phase1Machine()
    output = machine.run(deck("GD20LR20CR20BT05PD20H", "ABCDEFGH"))
    assert output == "\n\n"
    assert machine.toggle is True


def test_compare_false_falls_through():
    machine = Phase1Machine()
    output = machine.run(deck("GD20LR20CR21BT05PD20H", "ABCDEFGH"))
    assert output == "ABCDEFGH\n\n\n"
    assert machine.toggle is False


def test_add_instruction_with_arithmetic():
    machine = Phase1Machine(arithmetic=True)
    output = machine.run(deck("GD20LR20AD21SR22PD20H", "12  30  "))
    assert machine.register == list("42  ")
    assert output.startswith("12  30  42  \n")


def test_add_ignored_without_arithmetic():
    machine = Phase1Machine()
    output = machine.run(deck("GD20LR20AD21SR22PD20H", "12  30  "))
    assert output.startswith("12  30  12  \n")


def test_add_rejects_non_numeric_words():
    machine = Phase1Machine(arithmetic=True)
    with pytest.raises(ValueError):
        machine.run(deck("GD20LR20AD21H", "ABCDEFGH"))


def test_invalid_operand_raises():
    machine = Phase1Machine()
    with pytest.raises(ValueError):
        machine.run(deck("LRABH"))


def test_endless_branch_hits_step_limit():
    machine = Phase1Machine(max_steps=50)
    with pytest.raises(RuntimeError):
        machine.run(deck("BT00"))


def test_new_job_clears_memory():
    machine = Phase1Machine()
    output = machine.run(deck("GD10PD10H", "FIRST") + deck("PD10H"))
    assert output == "FIRST\n\n\n" + "\n\n\n"
    assert "".join(machine.memory[10]) == "\0" * 4


def test_messages_follow_the_deck():
    machine = Phase1Machine()
    machine.run(deck("GD10PD10H", "X"))
    assert machine.messages == [
        "New Job started",
        "Program Card loading",
        "Data card loading",
        "Read function called",
        "Write function called",
        "Terminate called",
        "END of Job",
    ]


def test_load_cards_one_image_per_job():
    images = load_cards(["$AMJ0001", "GD10PD10H", "$END0001"])
    assert len(images) == 1
    assert images[0][:3] == ("GD10", "PD10", "H\0\0\0")
    assert len(images[0]) == 100


def test_load_cards_position_carries_between_jobs():
    images = load_cards(["$AMJ0001", "GD10PD10H", "$END", "$AMJ0002", "LR20H"])
    assert len(images) == 2
    assert images[1][3] == "LR20"
    assert images[1][0] == "\0" * 4


def test_load_cards_loads_data_cards_as_program_text():
    images = load_cards(["$AMJ0001", "H", "$DTA", "ABCD", "$END"])
    assert images[0][:2] == ("H\0\0\0", "ABCD")


def test_load_cards_overflow_raises():
    with pytest.raises(ValueError):
        load_cards(["$AMJ0001"] + ["A" * 40] * 11)


def test_main_appends_output(tmp_path):
    source = tmp_path / "input.txt"
    target = tmp_path / "output.txt"
    source.write_text("\n".join(deck("GD10PD10H", "HELLO")) + "\n", encoding="utf-8")
    target.write_text("old\n", encoding="utf-8")
    assert main([str(source), "-o", str(target)]) == 0
    assert target.read_text(encoding="utf-8") == "old\nHELLO\n\n\n"


def test_main_missing_input_fails(tmp_path):
    assert main([str(tmp_path / "absent.txt"), "-o", str(tmp_path / "out.txt")]) == 1
    assert not (tmp_path / "out.txt").exists()