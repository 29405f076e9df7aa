import pytest

from miniasm.common.vmconf import TIME_LIMIT, Settings
from miniasm.common.errors import RuntimeFault, TimeLimitExceeded, MemoryIndexError
from miniasm.runtime.cpu import Program, State
from miniasm.runtime.memory import FillPolicy

import unit_utils


def test_empty_program_halts():
    program = Program(unit_utils.friendly_settings())
    assert program.run() == 0
    assert program.state == State.HALTED
    assert program.counter == 0


def test_defaults():
    program = Program()
    assert program.settings.time_limit == TIME_LIMIT
    assert program.memory.fill == FillPolicy.RANDOM
    assert len(program.memory) == 0


def test_friendly_fill():
    program = Program(Settings().update(friendly=True))
    assert program.memory.fill == FillPolicy.ZERO


def test_step_advances_before_execute():
    program = unit_utils.assemble('MEM 1\nNOP\nNOP\n')

    assert program.step()
    assert program.counter == 1
    assert program.current == 0

    assert program.step()
    assert program.step()
    assert program.counter == 3

    assert not program.step()
    assert program.state == State.HALTED
    assert not program.step()


def test_jif_not_taken():
    program = unit_utils.assemble('JIF 0 5\nNOP\n')
    program.step()
    assert program.counter == 1


def test_jif_taken():
    program = unit_utils.assemble('JIF 1 5\nNOP\n')
    program.step()
    assert program.counter == 5


def test_jifm():
    program = unit_utils.assemble('JIFM 1 2\nNOP\nNOP\nNOP\n')
    program.step()
    assert program.counter == 3

    program = unit_utils.assemble('JIFM 0 2\nNOP\nNOP\nNOP\n')
    program.step()
    assert program.counter == 1


def test_jmp_and_jmov():
    program = unit_utils.assemble('JMP 2\nNOP\nJMOV 1\nNOP\nNOP\n')
    program.step()
    assert program.counter == 2

    program.step()
    assert program.counter == 4


def test_jump_to_end_halts():
    program = unit_utils.execute_source('JMP 1\n')
    assert program.state == State.HALTED


@pytest.mark.parametrize('source', ['JMP 2\n', 'JIF 1 7\nNOP\n'])
def test_jump_past_end_faults(source):
    program = unit_utils.assemble(source)

    with pytest.raises(RuntimeFault, match='Invalid position'):
        program.run()

    assert program.state == State.FAULTED
    assert not program.step()


def test_jump_before_start_faults():
    # M[0] = -1
    program = unit_utils.assemble('MEM 1\nSUB 0 1 0\nJMP *0\n')

    with pytest.raises(RuntimeFault, match='Invalid position'):
        program.run()


def test_memory_fault_is_terminal():
    program = unit_utils.assemble('MEM 1\nSET 1 5\nOUT 1\n')

    with pytest.raises(MemoryIndexError):
        program.run()

    assert program.state == State.FAULTED
    assert program.counter == 2
    assert not program.step()


def test_zero_cost_loop():
    program = unit_utils.assemble('NOP\nJMP 0\n', time_limit=0)

    for _ in range(10000):
        assert program.step()

    assert program.elapsed == 0
    assert program.state == State.RUNNING


def test_output_loop_hits_time_limit(capsys):
    program = unit_utils.assemble('MEM 1\nOUT 1\nJMP 1\n', time_limit=100)

    with pytest.raises(TimeLimitExceeded):
        program.run()

    assert program.elapsed == 101
    assert program.state == State.FAULTED
    assert capsys.readouterr().out == '1\n' * 101


def test_time_limit_is_inclusive(capsys):
    program = unit_utils.assemble('OUT 1\nOUT 2\n', time_limit=2)
    assert program.run() == 2
    assert program.state == State.HALTED


def test_append_after_start():
    program = unit_utils.assemble('NOP\n')
    program.step()

    with pytest.raises(UserWarning):
        program.append(program.instructions[0])


def test_mem_shrink_then_read():
    program = unit_utils.assemble('MEM 4\nSET 5 3\nMEM 2\nOUT *3\n')

    with pytest.raises(MemoryIndexError):
        program.run()


def test_random_memory_is_reproducible():
    settings = Settings().update(seed=3)
    first = Program(settings)
    second = Program(settings)

    first.memory.resize(8)
    second.memory.resize(8)
    assert first.memory.cells == second.memory.cells
