import asyncio
import os
import time
import unittest
from unittest.mock import patch

from app.services.investigation import (
    FrameStatus,
    InvestigationConfig,
    InvestigationService,
    LineRole,
    StackFrame,
    UNKNOWN_FUNCTION,
)

from tests.helpers import CodebaseFixture, numbered_lines


def user_service_source() -> str:
    lines = [f"  # line {i}" for i in range(1, 31)]
    lines[0] = "class UserService"
    lines[23] = "  def get_user_data(id)"
    lines[24] = "    User.find(id).profile"
    lines[25] = "  end"
    lines[29] = "end"
    return "\n".join(lines)


class TestAnalyzeStackTrace(unittest.TestCase):
    def setUp(self):
        self.codebase = CodebaseFixture()
        self.service = InvestigationService()

    def tearDown(self):
        self.codebase.cleanup()

    def analyze(self, trace: str):
        return asyncio.run(self.service.analyze_stack_trace(trace, self.codebase.root))

    def test_ruby_frame_with_context(self):
        path = self.codebase.write("app/user_service.rb", user_service_source())

        analysis = self.analyze(
            "from app/services/user_service.rb:25:in `get_user_data'"
        )

        self.assertTrue(analysis.parsed)
        self.assertEqual(
            analysis.frames,
            (StackFrame(filename="user_service.rb", function="get_user_data", line=25),),
        )

        result = analysis.results[0]
        self.assertEqual(result.status, FrameStatus.RESOLVED)
        self.assertEqual(result.path, path)
        self.assertEqual(result.window.target_line, 25)
        self.assertEqual((result.window.first_line, result.window.last_line), (22, 28))
        self.assertEqual(result.window.containing_function, "get_user_data")

    def test_missing_file_does_not_stop_other_frames(self):
        self.codebase.write("src/worker.rb", numbered_lines(10))

        analysis = self.analyze(
            "/gems/activerecord/lib/base.rb:120:in `find'\n"
            "/app/src/worker.rb:4:in `perform'\n"
        )

        missing, found = analysis.results
        self.assertEqual(missing.status, FrameStatus.NOT_FOUND)
        self.assertIsNone(missing.path)
        self.assertIsNone(missing.window)
        self.assertEqual(found.status, FrameStatus.RESOLVED)
        self.assertEqual(found.window.target_line, 4)

    def test_line_outside_file_has_no_context(self):
        path = self.codebase.write("short.rb", numbered_lines(3))

        result = self.analyze("short.rb:50:in `call'").results[0]

        self.assertEqual(result.status, FrameStatus.NO_CONTEXT)
        self.assertEqual(result.path, path)
        self.assertIsNone(result.window)

    def test_unparseable_trace(self):
        analysis = self.analyze("Something went wrong\nno frames at all")

        self.assertFalse(analysis.parsed)
        self.assertEqual(analysis.results, ())

    def test_only_first_frames_are_analyzed_in_order(self):
        self.codebase.write("deep.rb", numbered_lines(10))
        trace = "\n".join(f"deep.rb:{i}:in `level_{i}'" for i in range(1, 8))

        analysis = self.analyze(trace)

        self.assertEqual(len(analysis.frames), 7)
        self.assertEqual(len(analysis.results), 5)
        self.assertEqual([r.frame.line for r in analysis.results], [1, 2, 3, 4, 5])
        self.assertEqual([r.window.target_line for r in analysis.results], [1, 2, 3, 4, 5])

    def test_slow_frame_times_out_alone(self):
        self.codebase.write("fast.rb", numbered_lines(5))
        service = InvestigationService(InvestigationConfig(frame_timeout=0.3))
        real_analyze_frame = service.analyze_frame

        def analyze_frame(frame, repo_path):
            if frame.filename == "slow.rb":
                time.sleep(1.0)
            return real_analyze_frame(frame, repo_path)

        with patch.object(service, "analyze_frame", side_effect=analyze_frame):
            analysis = asyncio.run(
                service.analyze_stack_trace(
                    "slow.rb:1:in `a'\nfast.rb:2:in `b'", self.codebase.root
                )
            )

        slow, fast = analysis.results
        self.assertEqual(slow.status, FrameStatus.NOT_FOUND)
        self.assertEqual(fast.status, FrameStatus.RESOLVED)


class TestAnalyzeFrame(unittest.TestCase):
    def setUp(self):
        self.codebase = CodebaseFixture()
        self.service = InvestigationService(InvestigationConfig(context_radius=1))

    def tearDown(self):
        self.codebase.cleanup()

    def test_declaration_above_target(self):
        self.codebase.write("jobs.py", "def run(job):\n    job.execute()\n")
        frame = StackFrame(filename="jobs.py", function="run", line=2)

        result = self.service.analyze_frame(frame, self.codebase.root)

        self.assertEqual(result.window.containing_function, "run")
        self.assertEqual(len(result.window.lines), 3)

    def test_first_line_is_unknown_function(self):
        self.codebase.write("boot.rb", "puts 'booting'\nstart!\n")
        frame = StackFrame(filename="boot.rb", function=UNKNOWN_FUNCTION, line=1)

        result = self.service.analyze_frame(frame, self.codebase.root)

        self.assertEqual(result.window.containing_function, UNKNOWN_FUNCTION)


class TestAnalyzeFiles(unittest.TestCase):
    def setUp(self):
        self.codebase = CodebaseFixture()
        self.service = InvestigationService()

    def tearDown(self):
        self.codebase.cleanup()

    def test_analyze_file(self):
        path = self.codebase.write(
            "models/user.rb", "require 'json'\n\ndef name\nend\n"
        )

        analysis = self.service.analyze_file(path)

        self.assertEqual(analysis.path, path)
        self.assertEqual(analysis.line_count, 5)
        self.assertEqual(analysis.functions, ("name",))
        self.assertEqual(analysis.imports, ("json",))
        self.assertIsNone(analysis.relevant_lines)

    def test_analyze_file_around_line(self):
        path = self.codebase.write("a.rb", numbered_lines(10))

        analysis = self.service.analyze_file(path, target_line=5, radius=2)

        self.assertEqual(
            [line.line_number for line in analysis.relevant_lines], [3, 4, 5, 6, 7]
        )
        self.assertEqual(analysis.relevant_lines[2].role, LineRole.TARGET)

    def test_analyze_file_line_out_of_range(self):
        path = self.codebase.write("a.rb", numbered_lines(3))
        self.assertIsNone(self.service.analyze_file(path, target_line=9).relevant_lines)

    def test_analyze_file_unreadable(self):
        path = self.codebase.write("bad.rb", b"\xff\xfe\xfa")
        self.assertIsNone(self.service.analyze_file(path))
        self.assertIsNone(
            self.service.analyze_file(os.path.join(self.codebase.root, "missing.rb"))
        )

    def test_analysis_is_repeatable(self):
        path = self.codebase.write("a.js", "import x from 'x';\nfunction a() {}\n")
        self.assertEqual(self.service.analyze_file(path), self.service.analyze_file(path))

    def test_analyze_codebase_skips_bad_files(self):
        self.codebase.write("good.rb", "def ok\nend")
        self.codebase.write("bad.rb", b"\xff\xfe\xfa")

        analyses = self.service.analyze_codebase(self.codebase.root)

        self.assertEqual(
            [os.path.basename(a.path) for a in analyses], ["good.rb"]
        )
        self.assertEqual(analyses[0].functions, ("ok",))

    def test_analyze_codebase_respects_ignore_and_cap(self):
        self.codebase.write(".gitignore", "legacy/\n")
        for i in range(30):
            self.codebase.write(f"legacy/old_{i:03}.rb", "def old\nend")
        for i in range(90):
            self.codebase.write(f"app/new_{i:03}.rb", "def new_one\nend")

        analyses = self.service.analyze_codebase(self.codebase.root)

        self.assertEqual(len(analyses), 50)
        self.assertTrue(all("legacy" not in a.path for a in analyses))


if __name__ == "__main__":
    unittest.main()
