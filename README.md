# storageoperator

Configuration and decision logic for running CSI driver operators from a
cluster storage operator. The package describes each supported CSI driver
operator, decides whether one should run on a given cluster, merges the
conditions a driver operator reports into the storage operator's own, and
checks the health of a driver operator's Deployment.

## Installation

```
pip install storageoperator
```

The only runtime dependency is PyYAML.

## Modules

- `storageoperator.config`: `PlatformType` (including the special
  `ALL_PLATFORMS`), `AzurePlatformStatus`, `PlatformStatus`,
  `InfrastructureStatus`, `Infrastructure` and `CSIOperatorConfig`, the
  description of one CSI driver operator (driver name, condition prefix,
  platform, optional status filter, static, management, CR, Deployment and
  ServiceMonitor asset paths, image replacer, `allow_disabled`, extra
  controllers and required feature gate).
- `storageoperator.replacer`: `Replacer(*oldnew)` replaces old strings with
  new ones in a single left-to-right pass, trying the pairs in the order
  given; `sidecar_replacer(environ)` builds the replacer for the sidecar image
  placeholders such as `${PROVISIONER_IMAGE}`.
- Per-platform configurations, each returning a `CSIOperatorConfig`:
  - `storageoperator.aws.get_aws_ebs_csi_operator_config(is_hypershift, environ)`
  - `storageoperator.azure.get_azure_disk_csi_operator_config(is_hypershift, environ)`,
    `get_azure_file_csi_operator_config(is_hypershift, environ)` and the status
    filter `is_not_azure_stack_cloud(status, is_installed)`
  - `storageoperator.openstack.get_openstack_cinder_csi_operator_config(is_hypershift, environ)`,
    `get_openstack_manila_operator_config(is_hypershift, environ, extra_controllers)`
    (extra controllers are kept for standalone clusters only)
  - `storageoperator.ibm.get_ibm_vpc_block_csi_operator_config(environ)`,
    `get_powervs_block_csi_operator_config(is_hypershift, environ)` and the
    status filter `is_not_external_topology_mode(status, is_installed)`
  - `storageoperator.gcp.get_gcp_pd_csi_operator_config(environ)`
  - `storageoperator.onprem.get_ovirt_csi_operator_config(environ)`,
    `get_vmware_vsphere_csi_operator_config(environ)`
- `storageoperator.conditions`: `ConditionStatus`, `OperatorCondition`,
  `union_condition`, `has_condition`, `has_disabled_condition` and
  `CSIDriverOperatorCR`. `CSIDriverOperatorCR.compute_conditions` turns a
  ClusterCSIDriver's conditions into the `<name>CSIDriverOperatorCRAvailable`,
  `...Progressing`, `...Degraded` and `...Upgradeable` conditions;
  `requested_cluster_csi_driver(log_level, read_asset)` loads the CR asset as
  YAML and sets its log levels and management state, raising `ValueError` if
  the asset is not a ClusterCSIDriver.
- `storageoperator.deployment`: `Deployment`, `DeploymentStatus`,
  `DeploymentCondition`, `get_deployment_condition`, `is_progressing`,
  `progressing_condition`, `deployment_controller_name` and
  `check_deployment_health`, which raises `DeploymentHealthError` when the
  Deployment exceeded its progress deadline, has failing replicas, or is
  neither available nor progressing.
- `storageoperator.starter`: `FeatureGate`, `CSIDriver`, `ObjectReference`,
  `RelatedObjects`, `should_run_controller`, `is_unsupported_csi_driver_running`,
  `is_no_match_error`, `namespace_replacer` and the errors
  `NoResourceMatchError`, `NoKindMatchError`, `AmbiguousKindError`,
  `AggregateError` and `UnsupportedCSIDriverError`. `should_run_controller`
  checks the platform, then the status filter, then the required feature
  gate, and raises `UnsupportedCSIDriverError` when a feature-gated driver is
  enabled while a CSIDriver without the `csi.openshift.io/managed` annotation
  exists.
- `storageoperator.hypershift`: `select_hosted_control_plane`,
  `hosted_control_plane_tolerations`, `hosted_control_plane_node_selector`,
  `hosted_control_plane_labels` (raising `HostedControlPlaneError` on a
  missing, ambiguous or malformed HostedControlPlane), `Toleration`,
  `aro_hcp_env_vars` and `deployment_replacers`, which lists the replacers
  applied in order to a hosted driver operator's Deployment asset.

Functions that take `environ` read image names from that mapping, or from
`os.environ` when it is `None`; unset variables become empty strings.

## Example

```python
from storageoperator.aws import get_aws_ebs_csi_operator_config
from storageoperator.config import Infrastructure, InfrastructureStatus, PlatformStatus, PlatformType
from storageoperator.starter import FeatureGate, should_run_controller

cfg = get_aws_ebs_csi_operator_config(False, {"AWS_EBS_DRIVER_IMAGE": "quay.example.com/ebs:1"})
infra = Infrastructure(status=InfrastructureStatus(platform_status=PlatformStatus(type=PlatformType.AWS)))

if should_run_controller(cfg, infra, FeatureGate(), None, False):
    print("starting", cfg.csi_driver_name)
    print(cfg.image_replacer.replace("image: ${DRIVER_IMAGE}"))
```

## What this package does not do

It does not talk to a Kubernetes API server. There are no clients,
informers or running controllers, and no command to start an operator: the
package only computes configurations, decisions, conditions and Deployment
settings from objects the caller passes in. Reading asset files, applying
objects and updating operator status are left to the caller.

## Running the tests

```
pip install -e .[test]
pytest
```