import unittest

from blang.core import ast
from blang.core.environment import Environment
from blang.core.evaluator import evaluate
from blang.core.objects import FALSE, NULL, TRUE, Error, Function, Integer, String
from blang.core.parser import parse


def run(testcase, source, env=None):
    program, diagnostics = parse(source)
    testcase.assertEqual([], diagnostics, source)
    return evaluate(program, env if env is not None else Environment())


class LiteralTestCase(unittest.TestCase):

    def test_integers(self):
        cases = {
            "5": 5, "10": 10, "-5": -5, "-10": -10,
            "5 + 5 + 5 + 5 - 10": 10, "2 * 2 * 2 * 2 * 2": 32, "-50 + 100 + -50": 0,
            "5 * 2 + 10": 20, "5 + 2 * 10": 25, "20 + 2 * -10": 0, "50 / 2 * 2 + 10": 60,
            "2 * (5 + 10)": 30, "3 * 3 * 3 + 10": 37, "3 * (3 * 3) + 10": 37,
            "(5 + 10 * 2 + 15 / 3) * 2 + -10": 50,
            "1 + 2 * 3": 7, "(1 + 2) * 3": 9, "1 - 2 - 3": -4,
        }
        for case, expected in cases.items():
            self.assertEqual(Integer(expected), run(self, case), case)

    def test_division_truncates(self):
        cases = {"7 / 2": 3, "-7 / 2": -3, "7 / -2": -3, "-7 / -2": 3, "1 / 3": 0}
        for case, expected in cases.items():
            self.assertEqual(Integer(expected), run(self, case), case)

    def test_booleans(self):
        cases = {
            "true": True, "false": False,
            "1 < 2": True, "1 > 2": False, "1 < 1": False, "1 == 1": True, "1 != 1": False, "1 != 2": True,
            "true == true": True, "false == false": True, "true == false": False, "true != false": True,
            "(1 < 2) == true": True, "(1 > 2) == true": False,
            "\"a\" == \"a\"": True, "\"a\" != \"b\"": True, "\"a\" == \"b\"": False,
            "if (false) { 1 } == if (false) { 2 }": True,
        }
        for case, expected in cases.items():
            self.assertIs(TRUE if expected else FALSE, run(self, case), case)

    def test_strings(self):
        self.assertEqual(String("Hello World!"), run(self, "\"Hello World!\""))
        self.assertEqual(String("Hello World!"), run(self, "\"Hello\" + \" \" + \"World!\""))

    def test_bang(self):
        cases = {"!true": False, "!false": True, "!5": False, "!!true": True, "!!5": True, "!0": False,
                 "!\"\"": False, "!if (false) { 1 }": True}
        for case, expected in cases.items():
            self.assertIs(TRUE if expected else FALSE, run(self, case), case)


class ControlFlowTestCase(unittest.TestCase):

    def test_if_else(self):
        cases = {
            "if (true) { 10 }": Integer(10),
            "if (false) { 10 }": NULL,
            "if (1) { 10 }": Integer(10),
            "if (0) { 1 } else { 2 }": Integer(1),
            "if (\"\") { 1 } else { 2 }": Integer(1),
            "if (1 < 2) { 10 }": Integer(10),
            "if (1 > 2) { 10 }": NULL,
            "if (1 > 2) { 10 } else { 20 }": Integer(20),
            "if (1 < 2) { 10 } else { 20 }": Integer(10),
            "if (1 > 2) { 1 } else if (2 > 1) { 2 } else { 3 }": Integer(2),
            "if (1 > 2) { 1 } else if (2 > 3) { 2 }": NULL,
            "if (true) { }": NULL,
        }
        for case, expected in cases.items():
            self.assertEqual(expected, run(self, case), case)

    def test_return(self):
        cases = {
            "return 10;": 10,
            "return 10; 9;": 10,
            "return 2 * 5; 9;": 10,
            "9; return 2 * 5; 9;": 10,
            "if (10 > 1) { if (10 > 1) { return 10; } return 1; }": 10,
            "let f = fn(x) { return x; x + 10; }; f(10);": 10,
            "let f = fn(x) { let result = x + 10; return result; return 10; }; f(10);": 20,
            "let f = fn() { let x = if (true) { return 7; }; 99 }; f();": 7,
            "let f = fn() { 1 + if (true) { return 3; } }; f();": 3,
            "let g = fn() { return 1; }; let f = fn() { g(); 2 }; f();": 2,
        }
        for case, expected in cases.items():
            self.assertEqual(Integer(expected), run(self, case), case)


class BindingTestCase(unittest.TestCase):

    def test_let(self):
        cases = {
            "let a = 5; a;": 5,
            "let a = 5 * 5; a;": 25,
            "let a = 5; let b = a; b;": 5,
            "let a = 5; let b = a; let c = a + b + 5; c;": 15,
            "let a = 1; let a = a + 1; a;": 2,
        }
        for case, expected in cases.items():
            self.assertEqual(Integer(expected), run(self, case), case)

    def test_let_result(self):
        self.assertIs(NULL, run(self, "let a = 5;"))

    def test_persistent_environment(self):
        env = Environment()
        run(self, "let x = 5;", env)
        self.assertEqual(Integer(10), run(self, "x * 2", env))

    def test_function_object(self):
        function = run(self, "fn(x) { x + 2; };")
        self.assertIsInstance(function, Function)
        self.assertEqual(["x"], function.parameters)
        self.assertEqual("{ (x + 2) }", str(function.body))
        self.assertEqual("fn(x)", function.inspect())

    def test_functions(self):
        cases = {
            "let identity = fn(x) { x; }; identity(5);": 5,
            "let identity = fn(x) { return x; }; identity(5);": 5,
            "let double = fn(x) { x * 2; }; double(5);": 10,
            "let add = fn(x, y) { x + y; }; add(5, 5);": 10,
            "let add = fn(x, y) { x + y; }; add(5 + 5, add(5, 5));": 20,
            "fn(x) { x; }(5)": 5,
            "let f = fn() { 1 }; f() + f()": 2,
        }
        for case, expected in cases.items():
            self.assertEqual(Integer(expected), run(self, case), case)

    def test_empty_body(self):
        self.assertIs(NULL, run(self, "fn() { }()"))

    def test_closures(self):
        cases = {
            "let newAdder = fn(x) { fn(y) { x + y }; }; let addTwo = newAdder(2); addTwo(3);": 5,
            "let newAdder = fn(x) { fn(y) { x + y }; }; newAdder(2)(3);": 5,
            "let a = newAdder; let newAdder = fn(x) { fn(y) { x + y } }; newAdder(1)(2)": None,
        }
        for case, expected in cases.items():
            if expected is None:
                self.assertEqual(Error("identifier not found: newAdder"), run(self, case), case)
            else:
                self.assertEqual(Integer(expected), run(self, case), case)

    def test_definition_time_scope(self):
        source = """
        let x = 1;
        let getX = fn() { x };
        let callWith = fn(x) { getX() };
        callWith(100);
        """
        self.assertEqual(Integer(1), run(self, source))

    def test_sibling_closures_share_frame(self):
        source = """
        let pair = fn(x) {
            let get = fn() { x };
            let twice = fn() { x * 2 };
            fn(which) { if (which) { get } else { twice } }
        };
        let p = pair(21);
        p(true)() + p(false)();
        """
        self.assertEqual(Integer(63), run(self, source))

    def test_shadowing(self):
        source = "let x = 5; let f = fn() { let x = 10; x; }; f(); x;"
        self.assertEqual(Integer(5), run(self, source))

        source = "let x = 5; let f = fn(x) { x }; f(7) + x;"
        self.assertEqual(Integer(12), run(self, source))

    def test_recursion(self):
        source = """
        let fib = fn(n) { if (n < 2) { n } else { fib(n - 1) + fib(n - 2) } };
        fib(15);
        """
        self.assertEqual(Integer(610), run(self, source))

        source = """
        let counter = fn(x) { if (x > 50) { return true; } else { let foobar = 9999; counter(x + 1); } };
        counter(0);
        """
        self.assertIs(TRUE, run(self, source))

    def test_higher_order(self):
        source = """
        let twice = fn(f, x) { f(f(x)) };
        let compose = fn(f, g) { fn(x) { g(f(x)) } };
        let inc = fn(x) { x + 1 };
        let square = fn(x) { x * x };
        twice(compose(inc, square), 2);
        """
        self.assertEqual(Integer(100), run(self, source))

    def test_function_equality(self):
        self.assertIs(TRUE, run(self, "let f = fn() { 1 }; f == f"))
        self.assertIs(FALSE, run(self, "fn() { 1 } == fn() { 1 }"))
        self.assertIs(TRUE, run(self, "let f = fn() { 1 }; let g = f; f != fn() { 1 }"))


class ErrorTestCase(unittest.TestCase):

    def test_messages(self):
        cases = {
            "5 + true;": "type mismatch: INTEGER + BOOLEAN",
            "5 + true; 5;": "type mismatch: INTEGER + BOOLEAN",
            "5 == true": "type mismatch: INTEGER == BOOLEAN",
            "1 == \"1\"": "type mismatch: INTEGER == STRING",
            "if (false) { 1 } == 0": "type mismatch: NULL == INTEGER",
            "-true": "unknown operator: -BOOLEAN",
            "-\"a\"": "unknown operator: -STRING",
            "true + false;": "unknown operator: BOOLEAN + BOOLEAN",
            "true < false;": "unknown operator: BOOLEAN < BOOLEAN",
            "5; true + false; 5": "unknown operator: BOOLEAN + BOOLEAN",
            "if (10 > 1) { true + false; }": "unknown operator: BOOLEAN + BOOLEAN",
            "if (10 > 1) { if (10 > 1) { return true + false; } return 1; }": "unknown operator: BOOLEAN + BOOLEAN",
            "\"Hello\" - \"World\"": "unknown operator: STRING - STRING",
            "fn() { 1 } + fn() { 1 }": "unknown operator: FUNCTION + FUNCTION",
            "foobar;": "identifier not found: foobar",
            "let x = y;": "identifier not found: y",
            "5();": "not a function: INTEGER",
            "let f = fn(a, b) { a }; f(1);": "wrong number of arguments: want=2, got=1",
            "fn() { 1 }(1, 2)": "wrong number of arguments: want=0, got=2",
            "1 / 0": "division by zero: 1 / 0",
            "let z = 0; 10 / z": "division by zero: 10 / 0",
            "9223372036854775807 + 1": "integer overflow: 9223372036854775807 + 1",
            "-9223372036854775807 - 2": "integer overflow: -9223372036854775807 - 2",
            "4611686018427387904 * 2": "integer overflow: 4611686018427387904 * 2",
            "let min = -9223372036854775807 - 1; -min": "integer overflow: --9223372036854775808",
            "let min = -9223372036854775807 - 1; min / -1": "integer overflow: -9223372036854775808 / -1",
        }
        for case, expected in cases.items():
            self.assertEqual(Error(expected), run(self, case), case)

    def test_short_circuit(self):
        cases = {
            "missing(undefinedArg)": "identifier not found: missing",
            "let f = fn(a, b) { a }; f(x, y)": "identifier not found: x",
            "if (nope) { 1 } else { 2 }": "identifier not found: nope",
            "(1 + true) + undefined": "type mismatch: INTEGER + BOOLEAN",
            "let f = fn() { -true; 5 }; f()": "unknown operator: -BOOLEAN",
            "!(1 + true)": "type mismatch: INTEGER + BOOLEAN",
            "return 1 + true;": "type mismatch: INTEGER + BOOLEAN",
        }
        for case, expected in cases.items():
            self.assertEqual(Error(expected), run(self, case), case)

    def test_environment_survives_error(self):
        env = Environment()
        self.assertEqual(Error("identifier not found: b"), run(self, "let a = 1; let c = b; let d = 2;", env))
        self.assertEqual(Integer(1), env.resolve("a"))
        self.assertIsNone(env.resolve("c"))
        self.assertIsNone(env.resolve("d"))
        self.assertEqual(Integer(2), run(self, "a + 1", env))

    def test_largest_integers(self):
        self.assertEqual(Integer(2 ** 63 - 1), run(self, "9223372036854775806 + 1"))
        self.assertEqual(Integer(-2 ** 63), run(self, "-9223372036854775807 - 1"))

    def test_unknown_node(self):
        self.assertRaises(TypeError, evaluate, ast.Node(), Environment())


if __name__ == '__main__':
    unittest.main()
