# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""Tests for document decoding, encoding and file loading."""

import json
import os
import tempfile
import unittest
import unittest.mock
from pathlib import Path

import yaml

from proxyctl.lib.core.codec import (
    InvalidDocumentError,
    dump_json,
    dump_yaml,
    from_dict,
    load_document,
    load_json_document,
    load_yaml_document,
    to_dict,
)
from proxyctl.lib.core.model import (
    ContainerShape,
    EnvVar,
    PodShape,
    ProviderType,
    ProxyConfig,
    ProxyWorkloadSpec,
    SeccompProfileType,
)

PROXY_YAML = """\
metadata:
  name: edge
  namespace: gateway-system
spec:
  provider:
    type: Kubernetes
    kubernetes:
      envoyDeployment:
        replicas: 0
        pod:
          labels:
            app: proxy
          containers:
            - name: shutdown-manager
              image: gateway:v2
        container:
          image: envoy:v1
          env:
            - name: LOG_FORMAT
              value: json
          securityContext:
            runAsNonRoot: true
            seccompProfile:
              type: RuntimeDefault
"""


class FromDictTests(unittest.TestCase):
    """Tests for from_dict()."""

    def test_full_document(self) -> None:
        doc = from_dict(ProxyConfig, yaml.safe_load(PROXY_YAML))
        self.assertEqual(doc.metadata.name, "edge")
        self.assertIs(doc.spec.provider.type, ProviderType.KUBERNETES)
        deployment = doc.spec.provider.kubernetes.envoy_deployment
        self.assertEqual(deployment.replicas, 0)
        self.assertEqual(deployment.pod.labels, {"app": "proxy"})
        self.assertEqual(
            deployment.pod.containers, [ContainerShape(name="shutdown-manager", image="gateway:v2")]
        )
        self.assertEqual(deployment.container.env, [EnvVar(name="LOG_FORMAT", value="json")])
        sc = deployment.container.security_context
        self.assertIs(sc.run_as_non_root, True)
        self.assertIs(sc.seccomp_profile.type, SeccompProfileType.RUNTIME_DEFAULT)

    def test_absent_and_null_fields_are_unset(self) -> None:
        doc = from_dict(ContainerShape, {"image": None})
        self.assertEqual(doc, ContainerShape())

    def test_null_mapping_value_rejected(self) -> None:
        with self.assertRaises(InvalidDocumentError) as ctx:
            from_dict(PodShape, {"labels": {"app": "proxy", "tier": None}})
        self.assertIn("labels.tier", str(ctx.exception))

    def test_null_list_item_rejected(self) -> None:
        with self.assertRaises(InvalidDocumentError):
            from_dict(ContainerShape, {"args": ["--log-level", None]})

    def test_unknown_field_rejected(self) -> None:
        with self.assertRaises(InvalidDocumentError) as ctx:
            from_dict(PodShape, {"labels": {}, "tolerations": []})
        self.assertIn("tolerations", str(ctx.exception))

    def test_nested_unknown_field_reports_path(self) -> None:
        data = {"spec": {"provider": {"kubernetes": {"envoyDeployment": {"replica": 2}}}}}
        with self.assertRaises(InvalidDocumentError) as ctx:
            from_dict(ProxyConfig, data)
        self.assertIn("spec.provider.kubernetes.envoyDeployment", str(ctx.exception))

    def test_invalid_enum_value(self) -> None:
        with self.assertRaises(InvalidDocumentError) as ctx:
            from_dict(ProxyWorkloadSpec, {"provider": {"type": "Nomad"}})
        self.assertIn("Kubernetes", str(ctx.exception))

    def test_wrong_shapes_rejected(self) -> None:
        cases = [
            (PodShape, {"labels": ["a"]}),
            (PodShape, {"containers": {"name": "x"}}),
            (ContainerShape, {"image": {"repo": "x"}}),
            (ContainerShape, {"resources": "small"}),
            (ProxyConfig, ["not", "a", "mapping"]),
        ]
        for cls, data in cases:
            with self.subTest(data=data):
                with self.assertRaises(InvalidDocumentError):
                    from_dict(cls, data)


class ToDictTests(unittest.TestCase):
    """Tests for to_dict() and the dump helpers."""

    def test_omits_unset_and_uses_document_keys(self) -> None:
        doc = ContainerShape(image="envoy:v1", env=[EnvVar(name="A")])
        self.assertEqual(to_dict(doc), {"image": "envoy:v1", "env": [{"name": "A"}]})

    def test_enums_encoded_as_values(self) -> None:
        data = {"provider": {"type": "Kubernetes"}}
        self.assertEqual(to_dict(from_dict(ProxyWorkloadSpec, data)), data)

    def test_decoded_document_encodes_back(self) -> None:
        data = yaml.safe_load(PROXY_YAML)
        self.assertEqual(to_dict(from_dict(ProxyConfig, data)), data)

    def test_dump_yaml_keeps_field_order(self) -> None:
        text = dump_yaml(ContainerShape(name="envoy", image="envoy:v1"))
        self.assertEqual(text, "name: envoy\nimage: envoy:v1\n")

    def test_dump_json(self) -> None:
        text = dump_json(ContainerShape(image="envoy:v1"))
        self.assertEqual(json.loads(text), {"image": "envoy:v1"})


class LoaderTests(unittest.TestCase):
    """Tests for the YAML/JSON file loaders."""

    def setUp(self) -> None:
        self._td = tempfile.TemporaryDirectory()
        self.base = Path(self._td.name)
        patcher = unittest.mock.patch.dict(
            os.environ, {"PROXYCTL_STATE_DIR": str(self.base / "state")}
        )
        patcher.start()
        self.addCleanup(patcher.stop)
        self.addCleanup(self._td.cleanup)

    def test_load_yaml(self) -> None:
        path = self.base / "instance.yml"
        path.write_text(PROXY_YAML, encoding="utf-8")
        doc = load_yaml_document(path, ProxyConfig)
        self.assertEqual(doc.metadata.name, "edge")

    def test_load_json(self) -> None:
        path = self.base / "class.json"
        path.write_text(json.dumps({"metadata": {"name": "cls"}}), encoding="utf-8")
        self.assertEqual(load_json_document(path, ProxyConfig).metadata.name, "cls")
        self.assertEqual(load_document(path, ProxyConfig).metadata.name, "cls")

    def test_missing_file_is_absent(self) -> None:
        self.assertIsNone(load_yaml_document(self.base / "nope.yml", ProxyConfig))
        self.assertIsNone(load_json_document(self.base / "nope.json", ProxyConfig))

    def test_empty_file_is_absent(self) -> None:
        path = self.base / "template.yml"
        path.write_text("", encoding="utf-8")
        self.assertIsNone(load_yaml_document(path, ProxyWorkloadSpec))
        path = self.base / "template.json"
        path.write_text("  \n", encoding="utf-8")
        self.assertIsNone(load_json_document(path, ProxyWorkloadSpec))

    def test_invalid_yaml(self) -> None:
        path = self.base / "bad.yml"
        path.write_text("spec: [unclosed\n", encoding="utf-8")
        with self.assertRaises(InvalidDocumentError):
            load_yaml_document(path, ProxyConfig)

    def test_non_utf8_file(self) -> None:
        for name in ("bad.yml", "bad.json"):
            with self.subTest(name=name):
                path = self.base / name
                path.write_bytes(b"\xff\xfe")
                with self.assertRaises(InvalidDocumentError) as ctx:
                    load_document(path, ProxyConfig)
                self.assertIn(str(path), str(ctx.exception))
                self.assertIsInstance(ctx.exception.__cause__, UnicodeDecodeError)

    def test_invalid_json(self) -> None:
        path = self.base / "bad.json"
        path.write_text("{", encoding="utf-8")
        with self.assertRaises(InvalidDocumentError):
            load_json_document(path, ProxyConfig)

    def test_loading_writes_debug_log(self) -> None:
        path = self.base / "instance.yml"
        path.write_text(PROXY_YAML, encoding="utf-8")
        load_yaml_document(path, ProxyConfig)
        log = (self.base / "state" / "proxyctl.log").read_text(encoding="utf-8")
        self.assertIn("load_yaml_document", log)


if __name__ == "__main__":
    unittest.main()
