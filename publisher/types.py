import click
from eth_utils import is_hex_address, to_checksum_address

SECONDS_SUFFIX = "s"


class Seconds(click.ParamType):
    """A non-negative duration such as `90` or `20s`."""

    name = "seconds"

    def convert(self, value, param, ctx):
        if isinstance(value, (int, float)):
            seconds = float(value)
        else:
            text = str(value).strip().lower()
            if text.endswith(SECONDS_SUFFIX):
                text = text[: -len(SECONDS_SUFFIX)]
            try:
                seconds = float(text)
            except ValueError:
                self.fail(f"'{value}' is not a duration in seconds", param, ctx)
        if seconds < 0:
            self.fail(f"'{value}' is negative", param, ctx)
        return seconds


class ChecksumAddress(click.ParamType):
    name = "checksum_address"

    def convert(self, value, param, ctx):
        if not is_hex_address(value):
            self.fail(f"'{value}' is not a contract address", param, ctx)
        return to_checksum_address(value)
