import os
import yaml

WORKFLOW_PATH = os.path.join(os.path.dirname(__file__), '..', '.github', 'workflows', 'ci.yml')


def test_ci_workflow_exists():
    """Ensure the primary CI workflow file has been created."""
    assert os.path.isfile(WORKFLOW_PATH), f"Expected workflow file at {WORKFLOW_PATH}"


def _load_workflow() -> dict:
    with open(WORKFLOW_PATH, 'r', encoding='utf-8') as fh:
        return yaml.safe_load(fh)


def test_ci_contains_required_jobs():
    workflow = _load_workflow()
    jobs = workflow.get('jobs', {})
    required = {'lint', 'test'}
    missing = required.difference(jobs)
    assert not missing, f"Missing expected job blocks in CI workflow: {', '.join(sorted(missing))}"


def test_ci_runs_pytest_on_supported_pythons():
    workflow = _load_workflow()
    test_job = workflow['jobs']['test']
    versions = test_job['strategy']['matrix']['python-version']
    assert '3.10' in versions, "Oldest supported interpreter is not tested"
    commands = ' '.join(step.get('run', '') for step in test_job['steps'])
    assert 'pytest' in commands, "Test job does not run pytest"
