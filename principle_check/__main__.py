from principle_check.cli import cli

cli(prog_name="principle-check")
