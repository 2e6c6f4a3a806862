import unittest

from coreinject import Injector


class TestVariadicConstructorInjection(unittest.IsolatedAsyncioTestCase):
    async def test_build_ignores_inherited_variadic_args_and_kwargs(self):
        class Base:
            def __init__(self, value: int = 7, *args, **kwargs):
                self.value = value
                self.args = args
                self.kwargs = kwargs

        class Derived(Base):
            ...
            # No explicit __init__; inherits Base.__init__ with *args/**kwargs

        def module(config):
            config.register("child").to(Derived)

        child = await Injector(module).get_bean("child")  # should ignore *args/**kwargs and use default for 'value'
        assert isinstance(child, Derived)
        assert child.value == 7
        assert child.args == ()
        assert child.kwargs == {}

    async def test_inherited_constructor_dependencies_are_injected(self):
        class Base:
            def __init__(self, value):
                self.value = value

        class Derived(Base): ...

        def module(config):
            config.register("value").to_instance(42)
            config.register("child").to(Derived)

        child = await Injector(module).get_bean("child")
        assert child.value == 42

    async def test_keyword_only_parameters_are_injected_by_keyword(self):
        class Client:
            def __init__(self, url, *, timeout, retries=3):
                self.url = url
                self.timeout = timeout
                self.retries = retries

        def module(config):
            config.register("url").to_instance("http://api")
            config.register("timeout").to_instance(10)
            config.register("client").to(Client)

        client = await Injector(module).get_bean("client")
        assert client.url == "http://api"
        assert client.timeout == 10
        assert client.retries == 3

    async def test_positional_only_parameters_are_injected_positionally(self):
        def module(config):
            config.register("a").to_instance(1)
            config.register("b").to_instance(2)
            config.register("pair").to_builder(lambda a, /, b: (a, b))

        assert await Injector(module).get_bean("pair") == (1, 2)
