from rich.pretty import pprint

from bosun import *


class Greet(Command):
    options = {
        "loud": Flag("-l", "--loud"),
        "greeting": Option("-g", "--greeting", default="hello"),
    }

    def action(self):
        style = "<<bold red>>" if self.getopt.get("loud") else "<<green>>"
        for name in self.params or ["world"]:
            self.stdio.outln(f"{style}{self.getopt.get('greeting')}, {name}<<reset>>")


if __name__ == '__main__':
    command = invoke(Greet, shell=True)
    pprint(dict(command.getopt.get()))
