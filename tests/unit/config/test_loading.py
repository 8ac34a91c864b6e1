"""Tests for project config discovery and resolution."""

import textwrap
import uuid

import pytest

from secret_stack.config.exceptions import ProjectConfigException
from secret_stack.config.loading import (
    find_config_file,
    get_secret_manager,
    import_object,
    load_project_config,
    resolve_secret_managers,
    resolve_stacks,
)
from secret_stack.manifests import Stack
from secret_stack.secrets import SecretManager

MANAGER_YAML = """
secret:
  managers:
    default:
      connectors:
        mem:
          type: in-memory
          options:
            values:
              VENDOR_API:
                api_key: my-app-key
                dataset: production
      providers:
        api_token:
          type: custom
          options:
            name: api-token-secret
            secret_type: vendor.com/custom
            allowed_keys: [api_key, dataset]
      secrets:
        - VENDOR_API
"""


def write_config(directory, content, name='secret-stack.yaml'):
    path = directory / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(content))
    return path


def unique_module(directory, source):
    """Write a project-local module with a name no other test uses."""
    module_name = f"project_{uuid.uuid4().hex}"
    (directory / f"{module_name}.py").write_text(textwrap.dedent(source))
    return module_name


class TestFindConfigFile:

    def test_explicit_path(self, tmp_path):
        path = write_config(tmp_path, 'stacks: null\n', name='custom.yaml')
        assert find_config_file(str(path)) == path

    def test_environment_variable(self, tmp_path, monkeypatch):
        path = write_config(tmp_path, 'stacks: null\n', name='deploy.yaml')
        monkeypatch.setenv('SECRET_STACK_CONFIG', str(path))
        assert find_config_file() == path

    def test_config_subdirectory(self, tmp_path, monkeypatch):
        write_config(tmp_path / 'config', 'stacks: null\n')
        monkeypatch.chdir(tmp_path)
        assert str(find_config_file()) == 'config/secret-stack.yaml'

    def test_not_found_lists_searched_paths(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        with pytest.raises(ProjectConfigException) as exc_info:
            find_config_file()
        assert 'secret-stack.yaml' in exc_info.value.searched_paths
        assert 'config/secret-stack.yaml' in exc_info.value.guidance


class TestLoadProjectConfig:

    def test_defaults(self, tmp_path):
        config = load_project_config(str(write_config(tmp_path, '{}\n')))

        assert config.stacks is None
        assert config.generate.output_mode == 'stack'
        assert config.secret.conflict.strategies.intra_provider == 'autoMerge'
        assert config.base_dir == tmp_path.resolve()

    def test_conflict_section(self, tmp_path):
        config = load_project_config(str(write_config(tmp_path, """
            secret:
              conflict:
                strict: true
                strategies:
                  cross_manager: overwrite
        """)))

        assert config.secret.conflict.strict is True
        assert config.secret.conflict.strategies.cross_manager == 'overwrite'
        assert config.secret.conflict.strategy_for('cross_manager') == 'error'

    def test_unknown_top_level_key(self, tmp_path):
        with pytest.raises(ProjectConfigException):
            load_project_config(str(write_config(tmp_path, 'stackz: x\n')))

    def test_invalid_strategy(self, tmp_path):
        with pytest.raises(ProjectConfigException):
            load_project_config(str(write_config(tmp_path, """
                secret:
                  conflict:
                    strategies:
                      intra_provider: merge-ish
            """)))

    def test_invalid_yaml(self, tmp_path):
        with pytest.raises(ProjectConfigException):
            load_project_config(str(write_config(tmp_path, 'secret: [unclosed\n')))

    def test_non_mapping(self, tmp_path):
        with pytest.raises(ProjectConfigException):
            load_project_config(str(write_config(tmp_path, '- a\n- b\n')))


class TestResolution:

    def test_inline_manager(self, tmp_path):
        config = load_project_config(str(write_config(tmp_path, MANAGER_YAML)))

        managers = resolve_secret_managers(config)

        assert list(managers) == ['default']
        effects = managers['default'].prepare()
        assert effects[0].value['type'] == 'vendor.com/custom'

    def test_connector_working_dir_option_is_kept(self, tmp_path):
        config = load_project_config(str(write_config(tmp_path, """
            secret:
              managers:
                default:
                  connectors:
                    project:
                      type: env
                    shared:
                      type: env
                      options:
                        working_dir: shared
                  providers:
                    opaque:
                      type: opaque
                      options:
                        name: app
        """)))

        connectors = resolve_secret_managers(config)['default'].get_connectors()

        assert connectors['project'].working_dir == tmp_path.resolve()
        assert connectors['shared'].working_dir == tmp_path.resolve() / 'shared'

    def test_imported_manager(self, tmp_path):
        module_name = unique_module(tmp_path, """
            from secret_stack import SecretManager, InMemoryConnector, OpaqueSecretProvider

            manager = (
                SecretManager()
                .add_connector('mem', InMemoryConnector({'TOKEN': 'abc'}))
                .add_provider('opaque', OpaqueSecretProvider(name='app'))
                .add_secret('TOKEN')
            )
        """)
        config = load_project_config(str(write_config(tmp_path, f"secret:\n  manager: {module_name}:manager\n")))

        managers = resolve_secret_managers(config)

        assert isinstance(managers['default'], SecretManager)

    def test_imported_object_must_be_manager(self, tmp_path):
        module_name = unique_module(tmp_path, "manager = object()\n")
        config = load_project_config(str(write_config(tmp_path, f"secret:\n  manager: {module_name}:manager\n")))

        with pytest.raises(ProjectConfigException):
            resolve_secret_managers(config)

    def test_stacks_callable(self, tmp_path):
        module_name = unique_module(tmp_path, """
            from secret_stack import Stack, simple_app_template

            def stacks():
                return [Stack.from_template(simple_app_template, {'name': 'web', 'image': 'nginx'})]
        """)
        config = load_project_config(str(write_config(tmp_path, f"stacks: {module_name}:stacks\n")))

        stacks = resolve_stacks(config)

        assert list(stacks) == ['web']
        assert isinstance(stacks['web'], Stack)

    def test_stacks_must_be_stacks(self, tmp_path):
        module_name = unique_module(tmp_path, "stacks = {'web': 'not a stack'}\n")
        config = load_project_config(str(write_config(tmp_path, f"stacks: {module_name}:stacks\n")))

        with pytest.raises(ProjectConfigException):
            resolve_stacks(config)

    def test_no_stacks(self, tmp_path):
        config = load_project_config(str(write_config(tmp_path, '{}\n')))
        assert resolve_stacks(config) == {}


class TestImportObject:

    def test_missing_module(self):
        with pytest.raises(ProjectConfigException):
            import_object('definitely_not_a_module_xyz:thing')

    def test_missing_attribute(self):
        with pytest.raises(ProjectConfigException):
            import_object('secret_stack.manifests:nothing_here')

    def test_dotted_form(self):
        assert import_object('secret_stack.manifests.Stack') is Stack

    def test_bare_name(self):
        with pytest.raises(ProjectConfigException):
            import_object('stack')


class TestGetSecretManager:

    def test_cached_per_config(self, tmp_path):
        path = str(write_config(tmp_path, MANAGER_YAML))

        first = get_secret_manager(config_path=path)
        second = get_secret_manager(config_path=path)

        assert first is second

    def test_defaults_to_last_loaded_config(self, tmp_path):
        path = write_config(tmp_path, MANAGER_YAML)
        load_project_config(str(path))

        assert get_secret_manager().has_secret('VENDOR_API')

    def test_unknown_name(self, tmp_path):
        path = str(write_config(tmp_path, MANAGER_YAML))
        with pytest.raises(ProjectConfigException) as exc_info:
            get_secret_manager('other', config_path=path)
        assert "['default']" in str(exc_info.value)
