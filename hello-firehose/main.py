import logging
import os
import sys

import ldclient
from ldclient import Config, Context

from ldfirehose import (ConfigurationError, FirehoseSender,
                        VariationDetailAnalyticsWrapper)

root = logging.getLogger()
root.setLevel(logging.INFO)

ch = logging.StreamHandler(sys.stdout)
ch.setLevel(logging.INFO)
formatter = logging.Formatter('%(asctime)s - %(name)s:%(lineno)d - %(levelname)s - %(message)s')
ch.setFormatter(formatter)
root.addHandler(ch)

if __name__ == '__main__':
    sdk_key = os.environ.get('LAUNCHDARKLY_SDK_KEY')
    flag_key = os.environ.get('LAUNCHDARKLY_FLAG_KEY')

    if not sdk_key:
        print("*** Please set the LAUNCHDARKLY_SDK_KEY env first")
        sys.exit(1)
    if not flag_key:
        print("*** Please set the LAUNCHDARKLY_FLAG_KEY env first")
        sys.exit(1)

    ldclient.set_config(Config(sdk_key))
    if not ldclient.get().is_initialized():
        print("*** SDK failed to initialize. Please check your internet connection and SDK credential for any typo.")
        sys.exit(1)
    print("*** SDK successfully initialized")

    sender = None
    try:
        sender = FirehoseSender()
        print("Firehose sender initialized successfully")
    except ConfigurationError as e:
        print("Failed to initialize Firehose sender: %s" % e)
        print("Continuing without Firehose integration...")

    wrapper = VariationDetailAnalyticsWrapper(ldclient.get(), sender)

    # This context should appear on your LaunchDarkly contexts dashboard soon after you run the demo.
    context = Context.builder('example-user-key').kind('user').set('tier', 'silver').build()

    print("\nEvaluating flag: %s" % flag_key)
    print("Context: user=%s, kind=%s\n" % (context.key, context.kind))

    detail = wrapper.variation_detail(flag_key, context, 'Control')
    reason = detail.reason or {}

    print("\n*** Flag Evaluation Result ***")
    print("Flag key: %s" % flag_key)
    print("Flag value: %s" % detail.value)
    print("Variation index: %s" % ('N/A' if detail.variation_index is None else detail.variation_index))
    print("Reason kind: %s" % reason.get('kind'))
    print("In experiment: %s" % ('Yes' if reason.get('inExperiment') is True else 'No'))

    wrapper.close()
    ldclient.get().close()
