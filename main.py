from rich.pretty import pprint

from terse import *


@command(usage="usage test")
def test(
        verbose=Flag("verbose", "v", usage="prints verbosely"),
        mem=Option("mem", "m", usage="aa", type=INT32),
        path=Option("path", "p", usage="sets path"),
):
    pass


@test.command
def foo(inner_verbose=Flag("verbose", "v", usage="prints verbosely, extra")):
    pass


if __name__ == '__main__':
    try:
        pprint(execute(test, __import__("sys").argv))
    except CommandException as fault:
        report(fault)
        usage.display(fault.options["tool"])
        raise SystemExit(2) from None
