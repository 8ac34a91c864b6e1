"""
Console entry point: exposes the task namespace as the `secret-stack` program.
"""

from invoke import Program

from secret_stack import __version__, namespace

program = Program(namespace=namespace, version=__version__, name='secret-stack', binary='secret-stack')


def main():
    program.run()


if __name__ == '__main__':
    main()
