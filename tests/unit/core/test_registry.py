import unittest

from exprsimp.core import EventEmitter, Registrant


class TestRegistrant(unittest.TestCase):
    def test_subclasses_register_in_their_root(self):
        class Shape(Registrant):
            pass

        class Circle(Shape):
            pass

        class Square(Shape):
            registrant_name = "box"

        self.assertIs(Shape.get("circle"), Circle)
        self.assertIs(Shape.get("CIRCLE"), Circle)
        self.assertIs(Shape.get("Box"), Square)
        self.assertCountEqual(Shape.all(), [Circle, Square])

    def test_sibling_hierarchies_do_not_share_registries(self):
        class Fruit(Registrant):
            pass

        class Vehicle(Registrant):
            pass

        class Apple(Fruit):
            pass

        self.assertIs(Fruit.find("apple"), Apple)
        self.assertIsNone(Vehicle.find("apple"))

    def test_get_unknown_raises_and_find_returns_none(self):
        class Animal(Registrant):
            pass

        with self.assertRaises(KeyError):
            Animal.get("unicorn")
        self.assertIsNone(Animal.find("unicorn"))

    def test_grandchildren_register_in_root(self):
        class Node(Registrant):
            pass

        class Inner(Node):
            pass

        class Leaf(Inner):
            pass

        self.assertIs(Node.get("leaf"), Leaf)


class TestEventEmitter(unittest.TestCase):
    def test_on_and_emit(self):
        emitter = EventEmitter[str]()
        received = []
        emitter.on("ping", lambda value: received.append(value))
        emitter.emit("ping", 1)
        emitter.emit("pong", 2)
        self.assertEqual(received, [1])

    def test_on_as_decorator(self):
        emitter = EventEmitter[str]()
        received = []

        @emitter.on("ping")
        def handler(value):
            received.append(value)

        emitter.emit("ping", "a")
        self.assertEqual(received, ["a"])

    def test_remove_and_clear(self):
        emitter = EventEmitter[str]()
        received = []
        emitter.on("ping", received.append)
        emitter.remove("ping", received.append)
        emitter.emit("ping", 1)
        emitter.on("ping", received.append)
        emitter.clear()
        emitter.emit("ping", 2)
        self.assertEqual(received, [])


if __name__ == "__main__":
    unittest.main()
