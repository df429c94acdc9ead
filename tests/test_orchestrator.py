"""Tests for batch annotation across files."""

import asyncio

import pytest

from sharpdoc.annotator.orchestrator import BatchOrchestrator
from sharpdoc.config.models import AnnotateSettings
from sharpdoc.workspace import NoInputError


class TestBatchOrchestrator:
    @pytest.mark.asyncio
    async def test_writes_annotated_files(self, cs_project, mock_client, sink):
        report = await BatchOrchestrator(mock_client, sink).run(cs_project)

        assert report.written == 2
        assert report.failed == 0
        greeter = (cs_project / "Demo" / "Greeter.cs").read_text()
        assert greeter.count("/// Generated.") == 3
        color = (cs_project / "Demo" / "Models" / "Color.cs").read_text()
        assert color.startswith("/// <summary>\n/// Generated.\n/// </summary>\nenum Color\n")
        assert "    /// </summary>\n    Red," in color

    @pytest.mark.asyncio
    async def test_ignored_dirs_untouched(self, cs_project, mock_client, sink):
        await BatchOrchestrator(mock_client, sink).run(cs_project)
        generated = cs_project / "Demo" / "obj" / "Generated.cs"
        assert generated.read_text() == "class Generated { }\n"

    @pytest.mark.asyncio
    async def test_parse_failure_isolated(self, cs_project, mock_client, sink):
        broken = cs_project / "Demo" / "Broken.cs"
        broken.write_text("class { int")

        report = await BatchOrchestrator(mock_client, sink).run(cs_project)

        assert broken.read_text() == "class { int"
        assert report.failed == 1
        assert report.written == 2
        output = sink.console.export_text()
        assert "Could not process" in output
        assert "Broken.cs" in output

    @pytest.mark.asyncio
    async def test_sink_messages(self, cs_project, mock_client, sink):
        await BatchOrchestrator(mock_client, sink).run(cs_project)
        output = sink.console.export_text()
        assert "[INFO] Processing project:" in output
        assert output.count("Done writing") == 2

    @pytest.mark.asyncio
    async def test_bom_and_crlf_preserved(self, tmp_path, mock_client, sink):
        path = tmp_path / "A.cs"
        path.write_bytes(b"\xef\xbb\xbfclass A\r\n{\r\n}\r\n")
        mock_client.execute.return_value = "/// <summary>A.</summary>"

        await BatchOrchestrator(mock_client, sink).run(tmp_path, "*.cs")

        assert path.read_bytes() == b"\xef\xbb\xbf/// <summary>A.</summary>\r\nclass A\r\n{\r\n}\r\n"

    @pytest.mark.asyncio
    async def test_no_input(self, tmp_path, mock_client, sink):
        with pytest.raises(NoInputError):
            await BatchOrchestrator(mock_client, sink).run(tmp_path)
        mock_client.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_solution_without_projects_reported(self, tmp_path, mock_client, sink):
        (tmp_path / "Empty.sln").write_text("Microsoft Visual Studio Solution File\n")

        report = await BatchOrchestrator(mock_client, sink).run(tmp_path, "*.sln")

        assert report.files == []
        assert report.skipped_units == [(tmp_path / "Empty.sln").resolve()]
        assert "No projects" in sink.console.export_text()

    @pytest.mark.asyncio
    async def test_concurrency_bounded(self, tmp_path, mock_client, sink, doc_answer):
        for i in range(5):
            (tmp_path / f"C{i}.cs").write_text(f"class C{i} {{ }}\n")
        active = 0
        peak = 0

        async def slow_execute(request):
            nonlocal active, peak
            active += 1
            peak = max(peak, active)
            await asyncio.sleep(0.01)
            active -= 1
            return doc_answer

        mock_client.execute.side_effect = slow_execute
        orchestrator = BatchOrchestrator(
            mock_client, sink, settings=AnnotateSettings(max_concurrency=2)
        )

        report = await orchestrator.run(tmp_path, "*.cs")

        assert report.written == 5
        assert peak == 2

    @pytest.mark.asyncio
    async def test_settings_flow_into_engine(self, tmp_path, mock_client, sink):
        path = tmp_path / "A.cs"
        path.write_text("class A { }\n")
        mock_client.execute.return_value = "/// <summary>A.</summary>"
        orchestrator = BatchOrchestrator(
            mock_client, sink, settings=AnnotateSettings(max_prompt_chars=5)
        )

        await orchestrator.run(tmp_path, "*.cs")

        request = mock_client.execute.await_args.args[0]
        assert request.messages[1].content.endswith("\nclass")
