"""Sample handlers and groups shared by the dispatch tests."""

from command_dispatch import Handler, HandlerGroup, Success


class SayHello(Handler):
    params_constraints = {"user_name": {"presence": True}}

    async def process(self, command):
        message = f"Hello {self.params['user_name']}."
        if self.pick_role() == "ADMIN":
            message += " You have administrator rights."
        return Success(value=message)


class SayBye(Handler):
    async def process(self, command):
        return Success(value="Bye")


class Echo(Handler):
    """Returns what the pipeline handed to process()."""

    async def process(self, command):
        return Success(
            value={
                "params": dict(self.params),
                "command": command,
                "bulk": self.context.bulk,
                "extra": dict(self.options.extra),
                "handler": self,
            }
        )


class WhoAmI(Handler):
    async def process(self, command):
        return self.pick_role()


class Explode(Handler):
    async def process(self, command):
        raise RuntimeError("handler exploded")


class HelloGroup(HandlerGroup):
    handlers = {
        "say_hello": SayHello,
        "say_bye": SayBye,
        "echo": Echo,
        "who_am_i": WhoAmI,
        "explode": Explode,
    }


class FailingAccessControl:
    """ACL adapter whose backend is unreachable."""

    def __init__(self) -> None:
        self.calls = 0

    async def query(self, role, resource, operation):
        self.calls += 1
        raise ConnectionError("policy store unreachable")
